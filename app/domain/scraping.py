"""
app/domain/scraping.py

Domain models for the scrape-ingest-query pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlparse

import soupsieve
from soupsieve import SelectorSyntaxError

ROLE_ADMIN = "admin"
ROLE_VIEWER = "viewer"
ALLOWED_ROLES = {ROLE_ADMIN, ROLE_VIEWER}

_REQUIRED_SELECTORS = ("article", "title", "link")


class InvalidScrapeConfig(ValueError):
    """Raised when a scrape configuration payload is malformed."""


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller resolved by the host environment.
    """

    identity: str
    role: str = ROLE_VIEWER

    def __post_init__(self) -> None:
        if self.role not in ALLOWED_ROLES:
            raise ValueError(f"Unknown role '{self.role}'. Allowed: {sorted(ALLOWED_ROLES)}.")

    @property
    def can_write(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class SelectorConfig:
    """
    CSS selectors locating one item and its fields within a page.
    """

    article: str
    title: str
    link: str
    price: str | None = None

    @classmethod
    def from_mapping(cls, payload: object) -> "SelectorConfig":
        if not isinstance(payload, Mapping):
            raise InvalidScrapeConfig("'selectors' must be an object.")

        values: dict[str, str | None] = {}
        for key in _REQUIRED_SELECTORS:
            raw = payload.get(key)
            if not isinstance(raw, str) or not raw.strip():
                raise InvalidScrapeConfig(f"Selector '{key}' is required and must be non-empty.")
            values[key] = raw.strip()

        raw_price = payload.get("price")
        if raw_price is not None and not isinstance(raw_price, str):
            raise InvalidScrapeConfig("Selector 'price' must be a string when provided.")
        values["price"] = raw_price.strip() if raw_price and raw_price.strip() else None

        for key, selector in values.items():
            if selector is None:
                continue
            try:
                soupsieve.compile(selector)
            except SelectorSyntaxError as exc:
                raise InvalidScrapeConfig(f"Selector '{key}' is not valid CSS: {selector!r}") from exc

        return cls(
            article=values["article"],
            title=values["title"],
            link=values["link"],
            price=values["price"],
        )


@dataclass(frozen=True)
class ScrapeConfig:
    """
    One scrape target: an absolute page URL plus its selectors.
    """

    url: str
    selectors: SelectorConfig

    @classmethod
    def from_mapping(cls, payload: object) -> "ScrapeConfig":
        """
        Build a validated config from a JSON-shaped mapping.
        """

        if not isinstance(payload, Mapping):
            raise InvalidScrapeConfig("Scrape config must be an object.")

        raw_url = payload.get("url")
        if not isinstance(raw_url, str) or not is_absolute_http_url(raw_url.strip()):
            raise InvalidScrapeConfig("'url' must be an absolute http(s) URL.")

        return cls(
            url=raw_url.strip(),
            selectors=SelectorConfig.from_mapping(payload.get("selectors")),
        )


@dataclass(frozen=True)
class Record:
    """
    One extracted item before persistence.
    """

    title: str
    url: str
    source: str
    price: str | None = None


@dataclass(frozen=True)
class StoredItem:
    """
    A persisted record keyed by its URL-derived id.
    """

    id: str
    title: str
    url: str
    source: str
    scraped_at: datetime
    price: str | None = None
    first_seen_at: datetime | None = None


@dataclass(frozen=True)
class ScrapeResult:
    """
    Successful outcome of one scrape run.
    """

    success: bool
    message: str
    count: int


def is_absolute_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
