"""
app/api/dependencies.py

Shared FastAPI dependencies for request authentication.
"""

from __future__ import annotations

from fastapi import Depends, Header

from app.domain.scraping import Principal
from app.services.scraping_service import ScrapingService, get_scraping_service

AUTHENTICATED_USER_HEADER = "X-Authenticated-User"


def get_principal(
    authenticated_user: str | None = Header(default=None, alias=AUTHENTICATED_USER_HEADER),
    scraping_service: ScrapingService = Depends(get_scraping_service),
) -> Principal | None:
    """
    Resolve the caller from the identity header set by the upstream gateway.

    Returns None when the request carries no identity; callers decide how to reject it.
    """

    return scraping_service.principal_for(authenticated_user)
