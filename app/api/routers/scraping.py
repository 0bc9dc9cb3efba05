"""
app/api/routers/scraping.py

Page scrape endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_principal
from app.domain.scraping import Principal
from app.schemas.scraping import ScrapeFailureResponse, ScrapeRequest, ScrapeResponse
from app.services.scraping_service import ScrapingService, get_scraping_service
from db.session import get_db

router = APIRouter(tags=["scraping"])


@router.post(
    "/scrape",
    response_model=ScrapeResponse,
    responses={
        401: {"model": ScrapeFailureResponse},
        403: {"model": ScrapeFailureResponse},
        502: {"model": ScrapeFailureResponse},
        500: {"model": ScrapeFailureResponse},
    },
)
def scrape(
    payload: ScrapeRequest | None = None,
    principal: Principal | None = Depends(get_principal),
    db: Session = Depends(get_db),
    scraping_service: ScrapingService = Depends(get_scraping_service),
) -> ScrapeResponse:
    """
    Scrape one page and upsert its items. Requires the admin role.
    """

    request = payload or ScrapeRequest()
    try:
        result = scraping_service.scrape(
            db=db,
            principal=principal,
            config=request.config_mapping(),
            target=request.target,
        )
    except (ValueError, FileNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return ScrapeResponse.from_result(result)
