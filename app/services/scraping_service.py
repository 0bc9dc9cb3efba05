"""
app/services/scraping_service.py

Service orchestration for page scraping and item listing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache

import requests
from sqlalchemy.orm import Session

from app.domain.scraping import Principal, ScrapeResult
from app.schemas.scraping import ItemListResponse, StoredItemResponse
from app.scraping.auth import StaticRoleLookup, resolve_principal
from app.scraping.config import ScrapeSettings, get_scrape_settings, resolve_scrape_config
from app.scraping.engine import Fetcher, ScrapePipeline, authorize_writer
from app.scraping.errors import ScrapePipelineError, StorageError
from app.scraping.fetcher import PageFetcher
from app.scraping.logging_utils import log_event
from app.scraping.query import ItemQueryService
from app.scraping.storage import SQLAlchemyItemStore

logger = logging.getLogger(__name__)


class ScrapingService:
    """
    Owns the process-wide HTTP session and builds per-request pipelines.
    """

    def __init__(
        self,
        settings: ScrapeSettings | None = None,
        *,
        fetcher: Fetcher | None = None,
        http_session: requests.Session | None = None,
    ) -> None:
        self._settings = settings or get_scrape_settings()
        self._fetcher = fetcher or PageFetcher(
            session=http_session or requests.Session(),
            timeout_seconds=self._settings.timeout_seconds,
            user_agent=self._settings.user_agent,
        )
        self._roles = StaticRoleLookup(self._settings.admin_identities)

    @property
    def settings(self) -> ScrapeSettings:
        return self._settings

    def principal_for(self, identity: str | None) -> Principal | None:
        return resolve_principal(identity, roles=self._roles)

    def scrape(
        self,
        *,
        db: Session,
        principal: Principal | None,
        config: Mapping[str, object] | None = None,
        target: str | None = None,
    ) -> ScrapeResult:
        """
        Authorize the caller, resolve the target config and run the pipeline.

        Raises a ScrapePipelineError for pipeline failures, including an
        unauthorized caller, and ValueError for an invalid config. The caller
        is checked before the config is resolved.
        """

        authorize_writer(principal)
        scrape_config = resolve_scrape_config(
            settings=self._settings,
            config=config,
            target=target,
        )
        pipeline = ScrapePipeline(fetcher=self._fetcher, store=self._store(db))
        return pipeline.run(principal=principal, config=scrape_config)

    def list_items(
        self,
        *,
        db: Session,
        principal: Principal | None,
        limit: int | None = None,
    ) -> ItemListResponse:
        """
        Return the read envelope; failures become `success=False` with no data.
        """

        query = ItemQueryService(
            store=self._store(db),
            default_limit=self._settings.default_list_limit,
        )
        try:
            items = query.list_items(principal=principal, limit=limit)
        except ScrapePipelineError as exc:
            return ItemListResponse(success=False, message=exc.message, code=exc.code)
        except ValueError as exc:
            return ItemListResponse(success=False, message=str(exc), code="invalid-argument")
        except StorageError as exc:
            log_event(
                logger,
                logging.ERROR,
                "items_list_failed",
                exc_info=exc,
                reason=exc.reason,
                error=str(exc),
            )
            return ItemListResponse(
                success=False,
                message="Failed to fetch scraped items.",
                code="internal",
            )

        return ItemListResponse(
            success=True,
            data=[StoredItemResponse.from_item(item) for item in items],
        )

    def _store(self, db: Session) -> SQLAlchemyItemStore:
        return SQLAlchemyItemStore(session=db, max_limit=self._settings.max_list_limit)


@lru_cache(maxsize=1)
def get_scraping_service() -> ScrapingService:
    """
    Build and cache the scraping service.
    """

    return ScrapingService()
