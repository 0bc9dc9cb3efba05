"""
app/schemas package marker.
"""

from app.schemas.scraping import (
    ItemListResponse,
    ScrapeConfigPayload,
    ScrapeFailureResponse,
    ScrapeRequest,
    ScrapeResponse,
    SelectorsPayload,
    StoredItemResponse,
)

__all__ = [
    "ItemListResponse",
    "ScrapeConfigPayload",
    "ScrapeFailureResponse",
    "ScrapeRequest",
    "ScrapeResponse",
    "SelectorsPayload",
    "StoredItemResponse",
]
