from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.scraping.errors import ScrapePipelineError

_FAILURE_STATUS = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "permission-denied": status.HTTP_403_FORBIDDEN,
    "fetch-failed": status.HTTP_502_BAD_GATEWAY,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _validate_env() -> None:
    """
    Check the database and scrape variables before anything connects.

    Raises RuntimeError listing every missing or invalid variable.

    Rules:
    - A database URL must be configured.
    - SCRAPE_ADMIN_IDENTITIES may be empty; nobody can scrape until it is set.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not database_url and not cloud_database_url and not local_database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    # --- Scrape timeout -------------------------------------------------
    raw_timeout = os.getenv("SCRAPE_TIMEOUT_SECONDS", "").strip()
    if raw_timeout:
        try:
            float(raw_timeout)
        except ValueError:
            errors.append(f"SCRAPE_TIMEOUT_SECONDS='{raw_timeout}' is not a number.")

    if errors:
        raise RuntimeError(
            "Startup validation failed - missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    if not os.getenv("SCRAPE_ADMIN_IDENTITIES", "").strip():
        logging.getLogger(__name__).warning(
            "SCRAPE_ADMIN_IDENTITIES is empty; every scrape request will be denied."
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_item_store() -> None:
    """
    Fail startup when the item store cannot be reached or is not migrated.
    """
    from sqlalchemy import inspect, text
    from sqlalchemy.exc import SQLAlchemyError

    from db.models.scraped_item import ScrapedItem
    from db.session import get_engine

    table_name = ScrapedItem.__tablename__
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            has_table = inspect(connection).has_table(table_name)
    except SQLAlchemyError as exc:
        raise RuntimeError("Item store database is unreachable.") from exc

    if not has_table:
        logging.getLogger(__name__).critical(
            "Table '%s' is missing; run 'alembic upgrade head' before starting the API.",
            table_name,
        )
        raise RuntimeError(f"Table '{table_name}' is missing from the item store database.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Refuse to serve traffic until the item store is reachable and migrated."""
    _check_item_store()
    logging.getLogger(__name__).info("Item store ready")
    yield


async def _scrape_failure_handler(request: Request, exc: ScrapePipelineError) -> JSONResponse:
    return JSONResponse(
        status_code=_FAILURE_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"success": False, "code": exc.code, "message": exc.message},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="PageHarvest API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.add_exception_handler(ScrapePipelineError, _scrape_failure_handler)

    from app.api.routers import items_router, scraping_router

    application.include_router(scraping_router)
    application.include_router(items_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
