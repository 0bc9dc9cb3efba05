"""
app/domain package marker.
"""

from app.domain.scraping import (
    InvalidScrapeConfig,
    Principal,
    Record,
    ScrapeConfig,
    ScrapeResult,
    SelectorConfig,
    StoredItem,
)

__all__ = [
    "InvalidScrapeConfig",
    "Principal",
    "Record",
    "ScrapeConfig",
    "ScrapeResult",
    "SelectorConfig",
    "StoredItem",
]
