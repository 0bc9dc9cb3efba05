from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from app.domain.scraping import ROLE_ADMIN, ROLE_VIEWER, Principal, ScrapeConfig  # noqa: E402
from app.scraping.errors import FetchFailed  # noqa: E402
from app.scraping.fetcher import FetchedPage  # noqa: E402
from db.base import Base  # noqa: E402
import db.models  # noqa: E402,F401

BOOKS_URL = "http://books.toscrape.com/"

BOOKS_MARKUP = """
<html>
  <body>
    <ol class="row">
      <li>
        <article class="product_pod">
          <h3><a href="catalogue/a-light-in-the-attic_1000/index.html"
                 title="A Light in the Attic">A Light in the ...</a></h3>
          <div class="product_price"><p class="price_color">£51.77</p></div>
        </article>
      </li>
      <li>
        <article class="product_pod">
          <h3><a href="catalogue/tipping-the-velvet_999/index.html"
                 title="Tipping the Velvet">Tipping the ...</a></h3>
          <div class="product_price"><p class="price_color">£53.74</p></div>
        </article>
      </li>
      <li>
        <article class="product_pod">
          <h3><a href="catalogue/soumission_998/index.html">Soumission</a></h3>
        </article>
      </li>
    </ol>
  </body>
</html>
"""

BOOKS_SELECTORS = {
    "article": "article.product_pod",
    "title": "h3 > a",
    "link": "h3 > a",
    "price": "div.product_price > p.price_color",
}


class FakeFetcher:
    """
    Serves canned pages and counts fetch calls.
    """

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    def fetch(self, url: str) -> FetchedPage:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchFailed(url=url, detail="connection refused")
        return FetchedPage(url=url, status_code=200, text=self.pages[url])


class StepClock:
    """
    Deterministic clock advancing one second per call.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._current = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._current += timedelta(seconds=1)
        return self._current


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def books_config() -> ScrapeConfig:
    return ScrapeConfig.from_mapping({"url": BOOKS_URL, "selectors": BOOKS_SELECTORS})


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher({BOOKS_URL: BOOKS_MARKUP})


@pytest.fixture()
def admin() -> Principal:
    return Principal(identity="admin@example.com", role=ROLE_ADMIN)


@pytest.fixture()
def viewer() -> Principal:
    return Principal(identity="viewer@example.com", role=ROLE_VIEWER)
