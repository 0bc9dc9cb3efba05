"""
Identity derivation and normalization for extracted records.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import urlparse

from app.domain.scraping import Record

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class ItemUpsert:
    """
    A normalized record paired with its storage id.
    """

    id: str
    title: str
    url: str
    source: str
    price: str | None = None


def derive_item_id(url: str) -> str:
    """
    Replace every non-alphanumeric character of `url` with `_`.

    Distinct URLs that differ only in replaced characters map to the same id.
    """

    return _NON_ALPHANUMERIC.sub("_", url)


def source_for(url: str) -> str:
    parsed = urlparse(url)
    return (parsed.hostname or "").lower()


class ItemNormalizer:
    """
    Convert extracted records into keyed upsert payloads.
    """

    def identify(self, record: Record) -> str:
        return derive_item_id(record.url)

    def normalize(self, records: Sequence[Record]) -> list[ItemUpsert]:
        """
        Key each record by id; a later record with the same id replaces an earlier one.
        """

        by_id: dict[str, ItemUpsert] = {}
        for record in records:
            item_id = self.identify(record)
            by_id.pop(item_id, None)
            by_id[item_id] = ItemUpsert(
                id=item_id,
                title=record.title,
                url=record.url,
                source=record.source or source_for(record.url),
                price=record.price,
            )
        return list(by_id.values())
