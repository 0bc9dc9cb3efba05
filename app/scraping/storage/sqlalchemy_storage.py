"""
SQLAlchemy-backed storage implementation for scraped items.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.scraping import StoredItem
from app.repositories.scraped_item_repository import ORDERABLE_COLUMNS, ScrapedItemRepository
from app.scraping.errors import StorageError
from app.scraping.logging_utils import log_event
from app.scraping.normalization import ItemUpsert
from app.scraping.storage.base import DEFAULT_LIST_LIMIT, DEFAULT_ORDER_BY, ItemStore
from db.models.scraped_item import ScrapedItem

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemyItemStore(ItemStore):
    """
    Persist scraped items through the repository and DB session.
    """

    def __init__(
        self,
        *,
        session: Session,
        max_limit: int = DEFAULT_MAX_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session = session
        self._max_limit = max(1, max_limit)
        self._clock = clock

    def upsert_batch(self, items: Sequence[ItemUpsert]) -> int:
        if not items:
            return 0

        self._validate(items)
        repository = ScrapedItemRepository(self._session)
        try:
            written = repository.upsert_many(items, scraped_at=self._clock())
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            log_event(
                logger,
                logging.ERROR,
                "item_upsert_failed",
                items=len(items),
                error=str(exc),
            )
            raise StorageError(StorageError.UNAVAILABLE, "Failed to persist scraped items.") from exc
        return written

    def list_items(
        self,
        *,
        order_by: str = DEFAULT_ORDER_BY,
        direction: str = "desc",
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[StoredItem]:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}.")
        if order_by not in ORDERABLE_COLUMNS:
            allowed = ", ".join(sorted(ORDERABLE_COLUMNS))
            raise ValueError(f"Unknown order_by '{order_by}'. Allowed: {allowed}.")
        normalized_direction = direction.strip().lower()
        if normalized_direction not in {"asc", "desc"}:
            raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}.")

        repository = ScrapedItemRepository(self._session)
        try:
            rows = repository.list_ordered(
                order_by=order_by,
                descending=normalized_direction == "desc",
                limit=min(limit, self._max_limit),
            )
        except SQLAlchemyError as exc:
            raise StorageError(StorageError.UNAVAILABLE, "Failed to read scraped items.") from exc
        return [self._to_domain(row) for row in rows]

    @staticmethod
    def _validate(items: Sequence[ItemUpsert]) -> None:
        for item in items:
            missing = [
                name
                for name in ("id", "title", "url", "source")
                if not getattr(item, name, None)
            ]
            if missing:
                raise StorageError(
                    StorageError.MALFORMED_ITEM,
                    f"Item {getattr(item, 'url', None)!r} is missing required fields: {', '.join(missing)}.",
                )

    @staticmethod
    def _to_domain(row: ScrapedItem) -> StoredItem:
        return StoredItem(
            id=row.id,
            title=row.title,
            url=row.url,
            price=row.price,
            source=row.source,
            scraped_at=row.scraped_at,
            first_seen_at=row.first_seen_at,
        )
