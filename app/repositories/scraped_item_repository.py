"""
app/repositories/scraped_item_repository.py

Persistence layer for scraped items.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import asc, desc, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.scraping.normalization import ItemUpsert
from db.models.scraped_item import ScrapedItem

ORDERABLE_COLUMNS = {
    "scraped_at": ScrapedItem.scraped_at,
    "first_seen_at": ScrapedItem.first_seen_at,
    "title": ScrapedItem.title,
    "url": ScrapedItem.url,
    "price": ScrapedItem.price,
    "source": ScrapedItem.source,
    "id": ScrapedItem.id,
}

_MERGEABLE_OPTIONAL_FIELDS = ("price",)


class ScrapedItemRepository:
    """
    Repository for keyed upserts and ordered reads of scraped items.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert_many(self, items: Sequence[ItemUpsert], *, scraped_at: datetime) -> int:
        """
        Insert new items and merge existing ones in one statement.

        Optional fields sent as NULL keep the stored value.
        """

        if not items:
            return 0

        payloads: list[dict[str, Any]] = [
            {
                "id": item.id,
                "title": item.title,
                "url": item.url,
                "price": item.price,
                "source": item.source,
                "scraped_at": scraped_at,
                "first_seen_at": scraped_at,
            }
            for item in items
        ]

        insert = self._insert_factory()
        stmt = insert(ScrapedItem).values(payloads)
        excluded = stmt.excluded
        update_columns: dict[str, Any] = {
            "title": excluded.title,
            "url": excluded.url,
            "source": excluded.source,
            "scraped_at": excluded.scraped_at,
        }
        for field_name in _MERGEABLE_OPTIONAL_FIELDS:
            update_columns[field_name] = func.coalesce(
                getattr(excluded, field_name),
                getattr(ScrapedItem, field_name),
            )

        stmt = stmt.on_conflict_do_update(
            index_elements=[ScrapedItem.id],
            set_=update_columns,
        )
        self._session.execute(stmt)
        return len(payloads)

    def list_ordered(
        self,
        *,
        order_by: str,
        descending: bool,
        limit: int,
    ) -> list[ScrapedItem]:
        column = ORDERABLE_COLUMNS[order_by]
        ordering = desc(column) if descending else asc(column)
        stmt = (
            select(ScrapedItem)
            .order_by(ordering, ScrapedItem.id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(self._session.scalars(stmt).all())

    def count(self) -> int:
        return int(self._session.scalar(select(func.count()).select_from(ScrapedItem)) or 0)

    def _insert_factory(self) -> Any:
        dialect = self._session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert
        return postgresql.insert
