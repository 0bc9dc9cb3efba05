"""
app/repositories package marker.
"""

from app.repositories.scraped_item_repository import ScrapedItemRepository

__all__ = ["ScrapedItemRepository"]
