"""
Authorized read access to stored items.
"""

from __future__ import annotations

import logging

from app.domain.scraping import Principal, StoredItem
from app.scraping.errors import Unauthenticated
from app.scraping.logging_utils import log_event
from app.scraping.storage import ItemStore
from app.scraping.storage.base import DEFAULT_LIST_LIMIT

logger = logging.getLogger(__name__)


class ItemQueryService:
    """
    Lists the most recently scraped items for any authenticated principal.
    """

    def __init__(self, *, store: ItemStore, default_limit: int = DEFAULT_LIST_LIMIT) -> None:
        self._store = store
        self._default_limit = max(1, default_limit)

    def list_items(
        self,
        *,
        principal: Principal | None,
        limit: int | None = None,
    ) -> list[StoredItem]:
        if principal is None:
            log_event(logger, logging.WARNING, "items_list_unauthenticated")
            raise Unauthenticated()

        effective_limit = self._default_limit if limit is None else limit
        items = self._store.list_items(
            order_by="scraped_at",
            direction="desc",
            limit=effective_limit,
        )
        log_event(
            logger,
            logging.INFO,
            "items_listed",
            identity=principal.identity,
            limit=effective_limit,
            count=len(items),
        )
        return items
