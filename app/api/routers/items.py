"""
app/api/routers/items.py

Scraped item listing endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.dependencies import get_principal
from app.domain.scraping import Principal
from app.schemas.scraping import ItemListResponse
from app.services.scraping_service import ScrapingService, get_scraping_service
from db.session import get_db

router = APIRouter(tags=["items"])

_FAILURE_STATUS = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "invalid-argument": status.HTTP_400_BAD_REQUEST,
}


@router.get("/items", response_model=ItemListResponse, response_model_exclude_none=True)
def list_items(
    limit: int | None = Query(default=None, ge=1, description="Maximum number of items"),
    principal: Principal | None = Depends(get_principal),
    db: Session = Depends(get_db),
    scraping_service: ScrapingService = Depends(get_scraping_service),
) -> ItemListResponse | JSONResponse:
    """
    List stored items, most recently scraped first. Any authenticated caller may read.
    """

    response = scraping_service.list_items(db=db, principal=principal, limit=limit)
    if response.success:
        return response

    return JSONResponse(
        status_code=_FAILURE_STATUS.get(response.code or "", status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"success": False, "message": response.message},
    )
