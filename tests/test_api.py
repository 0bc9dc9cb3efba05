"""
tests/test_api.py

HTTP surface for scraping and item listing, with the database and the
outbound fetcher replaced by test doubles.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import db.session
from app.main import _check_item_store, app
from app.scraping.config.models import ScrapeSettings
from app.services.scraping_service import ScrapingService, get_scraping_service
from conftest import BOOKS_SELECTORS, BOOKS_URL, FakeFetcher
from db.session import get_db

ADMIN = "admin@example.com"
VIEWER = "viewer@example.com"


@pytest.fixture()
def client(engine: Engine, fetcher: FakeFetcher) -> Iterator[TestClient]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    targets_path = Path(__file__).resolve().parents[1] / "app" / "scraping" / "config" / "targets.json"
    service = ScrapingService(
        ScrapeSettings(
            targets_path=str(targets_path),
            default_target="books_toscrape",
            user_agent="TestBot/1.0",
            timeout_seconds=5.0,
            admin_identities=frozenset({ADMIN}),
        ),
        fetcher=fetcher,
    )

    def _get_db() -> Iterator:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_scraping_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _as(identity: str) -> dict[str, str]:
    return {"X-Authenticated-User": identity}


class TestScrapeEndpoint:
    def test_without_identity_is_unauthenticated(self, client: TestClient, fetcher: FakeFetcher) -> None:
        response = client.post("/scrape", json={})

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "code": "unauthenticated",
            "message": "You must be logged in to perform this action.",
        }
        assert fetcher.calls == []

    def test_viewer_is_forbidden_without_fetching(self, client: TestClient, fetcher: FakeFetcher) -> None:
        response = client.post("/scrape", json={}, headers=_as(VIEWER))

        assert response.status_code == 403
        assert response.json()["code"] == "permission-denied"
        assert fetcher.calls == []

    def test_unknown_target_without_identity_is_unauthenticated(self, client: TestClient) -> None:
        response = client.post("/scrape", json={"target": "nope"})

        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"
        assert "books_toscrape" not in response.text

    def test_invalid_config_from_viewer_is_forbidden(self, client: TestClient, fetcher: FakeFetcher) -> None:
        payload = {"config": {"url": "relative/page", "selectors": BOOKS_SELECTORS}}

        response = client.post("/scrape", json=payload, headers=_as(VIEWER))

        assert response.status_code == 403
        assert response.json()["code"] == "permission-denied"
        assert fetcher.calls == []

    def test_admin_scrapes_default_target(self, client: TestClient, fetcher: FakeFetcher) -> None:
        response = client.post("/scrape", headers=_as(ADMIN))

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "3 items scraped and saved/updated.",
            "count": 3,
        }
        assert fetcher.calls == [BOOKS_URL]

    def test_unreachable_inline_target_is_fetch_failed(self, client: TestClient) -> None:
        payload = {"config": {"url": "http://unreachable.invalid/", "selectors": BOOKS_SELECTORS}}

        response = client.post("/scrape", json=payload, headers=_as(ADMIN))

        assert response.status_code == 502
        assert response.json()["code"] == "fetch-failed"
        listed = client.get("/items", headers=_as(ADMIN)).json()
        assert listed == {"success": True, "data": []}

    def test_invalid_inline_config_is_bad_request(self, client: TestClient) -> None:
        payload = {"config": {"url": "relative/page", "selectors": BOOKS_SELECTORS}}

        response = client.post("/scrape", json=payload, headers=_as(ADMIN))

        assert response.status_code == 400

    def test_unknown_target_is_bad_request(self, client: TestClient) -> None:
        response = client.post("/scrape", json={"target": "movies"}, headers=_as(ADMIN))

        assert response.status_code == 400
        assert "Unknown scrape target" in response.json()["detail"]


class TestItemsEndpoint:
    def test_viewer_lists_scraped_items(self, client: TestClient) -> None:
        client.post("/scrape", headers=_as(ADMIN))

        response = client.get("/items", headers=_as(VIEWER))

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert len(body["data"]) == 3
        first = body["data"][0]
        assert {"id", "title", "url", "source", "scrapedAt"} <= set(first)
        assert first["source"] == "books.toscrape.com"

    def test_limit_bounds_result(self, client: TestClient) -> None:
        client.post("/scrape", headers=_as(ADMIN))

        response = client.get("/items", params={"limit": 2}, headers=_as(VIEWER))

        assert len(response.json()["data"]) == 2

    def test_without_identity_is_rejected(self, client: TestClient) -> None:
        response = client.get("/items")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "You must be logged in to perform this action.",
        }

    def test_non_positive_limit_is_rejected(self, client: TestClient) -> None:
        response = client.get("/items", params={"limit": 0}, headers=_as(VIEWER))

        assert response.status_code == 422


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


class TestStartupCheck:
    def test_migrated_store_passes(self, engine: Engine, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(db.session, "get_engine", lambda: engine)

        _check_item_store()

    def test_missing_table_fails_startup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        empty = create_engine("sqlite://", poolclass=StaticPool)
        monkeypatch.setattr(db.session, "get_engine", lambda: empty)

        with pytest.raises(RuntimeError, match="scraped_items"):
            _check_item_store()
