"""
Scrape pipeline: authorize, fetch, extract, persist.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from app.domain.scraping import Principal, ScrapeConfig, ScrapeResult
from app.scraping.errors import (
    FetchFailed,
    InternalError,
    PermissionDenied,
    ScrapePipelineError,
    Unauthenticated,
)
from app.scraping.fetcher import FetchedPage
from app.scraping.logging_utils import log_event
from app.scraping.normalization import ItemNormalizer
from app.scraping.parsing import HTMLItemExtractor
from app.scraping.storage import ItemStore

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchedPage: ...


class ScrapePipeline:
    """
    Runs one scrape request end to end against injected fetcher and store.
    """

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        store: ItemStore,
        normalizer: ItemNormalizer | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._normalizer = normalizer or ItemNormalizer()
        self.state = PipelineState.IDLE

    def run(self, *, principal: Principal | None, config: ScrapeConfig) -> ScrapeResult:
        """
        Scrape `config.url` and upsert the extracted items.

        Raises a `ScrapePipelineError` subclass on any failure; no step is retried.
        """

        self._transition(PipelineState.AUTHORIZING, url=config.url)
        try:
            principal = self._authorize(principal)
        except ScrapePipelineError:
            self._transition(PipelineState.FAILED, url=config.url)
            raise

        log_event(logger, logging.INFO, "scrape_requested", identity=principal.identity, url=config.url)

        try:
            return self._execute(principal=principal, config=config)
        except FetchFailed as exc:
            exc.stage = exc.stage or self.state.value
            self._fail(exc, principal=principal, config=config)
            raise
        except Exception as exc:
            failure = InternalError(stage=self.state.value)
            self._fail(exc, principal=principal, config=config)
            raise failure from exc

    def _execute(self, *, principal: Principal, config: ScrapeConfig) -> ScrapeResult:
        self._transition(PipelineState.FETCHING, url=config.url)
        page = self._fetcher.fetch(config.url)

        self._transition(PipelineState.EXTRACTING, url=page.url)
        records = HTMLItemExtractor.extract(
            markup=page.text,
            base_url=page.url,
            selectors=config.selectors,
        )
        log_event(logger, logging.INFO, "items_extracted", url=config.url, count=len(records))

        if not records:
            self._transition(PipelineState.DONE, url=config.url)
            return ScrapeResult(
                success=True,
                message="No items found to scrape.",
                count=0,
            )

        self._transition(PipelineState.PERSISTING, url=config.url)
        items = self._normalizer.normalize(records)
        written = self._store.upsert_batch(items)
        log_event(
            logger,
            logging.INFO,
            "items_persisted",
            identity=principal.identity,
            url=config.url,
            count=written,
        )

        self._transition(PipelineState.DONE, url=config.url)
        return ScrapeResult(
            success=True,
            message=f"{written} items scraped and saved/updated.",
            count=written,
        )

    def _authorize(self, principal: Principal | None) -> Principal:
        return authorize_writer(principal)

    def _fail(self, exc: Exception, *, principal: Principal, config: ScrapeConfig) -> None:
        log_event(
            logger,
            logging.ERROR,
            "scrape_failed",
            exc_info=exc,
            identity=principal.identity,
            url=config.url,
            stage=self.state.value,
            error=str(exc),
        )
        self._transition(PipelineState.FAILED, url=config.url)

    def _transition(self, state: PipelineState, **fields: object) -> None:
        previous = self.state
        self.state = state
        log_event(
            logger,
            logging.DEBUG,
            "scrape_state_changed",
            from_state=previous.value,
            to_state=state.value,
            **fields,
        )


def authorize_writer(principal: Principal | None) -> Principal:
    """
    Return the principal when it may run a scrape.

    Raises `Unauthenticated` without a principal and `PermissionDenied` for
    a principal lacking the admin role.
    """

    if principal is None:
        log_event(logger, logging.ERROR, "scrape_unauthenticated")
        raise Unauthenticated(stage=PipelineState.AUTHORIZING.value)
    if not principal.can_write:
        log_event(
            logger,
            logging.WARNING,
            "scrape_permission_denied",
            identity=principal.identity,
            role=principal.role,
        )
        raise PermissionDenied(stage=PipelineState.AUTHORIZING.value)
    return principal
