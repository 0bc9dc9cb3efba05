"""
Single-page HTTP fetcher for scrape targets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from app.scraping.errors import FetchFailed
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

MAX_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class FetchedPage:
    """
    Body of a fetched page and the URL it was finally served from.
    """

    url: str
    status_code: int
    text: str


class PageFetcher:
    """
    Performs one bounded GET per call; failures are reported, never retried.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        timeout_seconds: float = MAX_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ) -> None:
        self._session = session
        self._timeout_seconds = min(MAX_TIMEOUT_SECONDS, max(1.0, timeout_seconds))
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def fetch(self, url: str) -> FetchedPage:
        try:
            response = self._session.get(
                url,
                headers=self._headers,
                timeout=self._timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            log_event(logger, logging.WARNING, "page_fetch_failed", url=url, error=str(exc))
            raise FetchFailed(url=url, detail=str(exc)) from exc

        if not 200 <= response.status_code < 300:
            log_event(
                logger,
                logging.WARNING,
                "page_fetch_failed",
                url=url,
                status_code=response.status_code,
            )
            raise FetchFailed(
                f"Target responded with HTTP {response.status_code}.",
                url=url,
                status_code=response.status_code,
                detail=response.reason,
            )

        log_event(logger, logging.INFO, "page_fetched", url=url, status_code=response.status_code)
        return FetchedPage(
            url=response.url or url,
            status_code=response.status_code,
            text=response.text,
        )
