"""
Storage layer interfaces for scraped items.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.domain.scraping import StoredItem
from app.scraping.normalization import ItemUpsert

DEFAULT_ORDER_BY = "scraped_at"
DEFAULT_LIST_LIMIT = 50


class ItemStore(ABC):
    """
    Storage abstraction for keyed item upserts and ordered reads.
    """

    @abstractmethod
    def upsert_batch(self, items: Sequence[ItemUpsert]) -> int:
        """
        Merge items into the store atomically and return the written count.
        """

    @abstractmethod
    def list_items(
        self,
        *,
        order_by: str = DEFAULT_ORDER_BY,
        direction: str = "desc",
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[StoredItem]:
        """
        Return at most `limit` items ordered by `order_by`.
        """
