from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from app.scraping.errors import FetchFailed
from app.scraping.fetcher import MAX_TIMEOUT_SECONDS, PageFetcher


def _response(status_code: int, *, text: str = "", url: str = "https://example.com/") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.url = url
    response.reason = "Not Found" if status_code == 404 else "OK"
    return response


def test_returns_body_and_final_url() -> None:
    session = MagicMock()
    session.get.return_value = _response(200, text="<html></html>", url="https://example.com/final")

    page = PageFetcher(session=session, user_agent="TestBot/1.0").fetch("https://example.com/start")

    assert page.text == "<html></html>"
    assert page.url == "https://example.com/final"
    _, kwargs = session.get.call_args
    assert kwargs["headers"] == {"User-Agent": "TestBot/1.0"}
    assert kwargs["allow_redirects"] is True


def test_timeout_is_capped() -> None:
    fetcher = PageFetcher(session=MagicMock(), timeout_seconds=600)

    assert fetcher.timeout_seconds == MAX_TIMEOUT_SECONDS


def test_non_2xx_raises_with_status() -> None:
    session = MagicMock()
    session.get.return_value = _response(404)

    with pytest.raises(FetchFailed) as excinfo:
        PageFetcher(session=session).fetch("https://example.com/missing")

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://example.com/missing"


def test_timeout_raises_fetch_failed_once() -> None:
    session = MagicMock()
    session.get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(FetchFailed) as excinfo:
        PageFetcher(session=session, timeout_seconds=5).fetch("https://slow.example.com/")

    assert excinfo.value.status_code is None
    assert "timed out" in (excinfo.value.detail or "")
    assert session.get.call_count == 1
    assert session.get.call_args.kwargs["timeout"] == 5
