"""
app/schemas/scraping.py

Request and response schemas for scrape and item listing operations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.scraping import ScrapeResult, StoredItem


class SelectorsPayload(BaseModel):
    """
    CSS selectors for one scrape target.
    """

    article: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)
    price: str | None = None


class ScrapeConfigPayload(BaseModel):
    url: str = Field(..., min_length=1, description="Absolute page URL")
    selectors: SelectorsPayload


class ScrapeRequest(BaseModel):
    """
    Inline config, or the name of a configured target; neither selects the default target.
    """

    config: ScrapeConfigPayload | None = None
    target: str | None = Field(default=None, description="Configured target name")

    def config_mapping(self) -> dict[str, Any] | None:
        if self.config is None:
            return None
        return self.config.model_dump(exclude_none=True)


class ScrapeResponse(BaseModel):
    success: bool
    message: str
    count: int = Field(..., ge=0)

    @classmethod
    def from_result(cls, result: ScrapeResult) -> "ScrapeResponse":
        return cls(success=result.success, message=result.message, count=result.count)


class ScrapeFailureResponse(BaseModel):
    success: bool = False
    code: str
    message: str


class StoredItemResponse(BaseModel):
    """
    API response model for one stored item.
    """

    id: str
    title: str
    url: str
    price: str | None = None
    source: str
    scraped_at: datetime = Field(..., serialization_alias="scrapedAt")

    @classmethod
    def from_item(cls, item: StoredItem) -> "StoredItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            url=item.url,
            price=item.price,
            source=item.source,
            scraped_at=item.scraped_at,
        )


class ItemListResponse(BaseModel):
    success: bool
    data: list[StoredItemResponse] = Field(default_factory=list)
    message: str | None = None
    code: str | None = None
