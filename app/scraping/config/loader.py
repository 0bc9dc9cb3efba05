"""
Environment + JSON config loader for the scrape pipeline.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from app.domain.scraping import InvalidScrapeConfig, ScrapeConfig
from app.scraping.config.models import ScrapeSettings
from app.scraping.fetcher import MAX_TIMEOUT_SECONDS
from db.config import get_int_env, load_env_files


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_csv_env(name: str) -> frozenset[str]:
    raw = os.getenv(name) or ""
    return frozenset(item.strip().lower() for item in raw.split(",") if item.strip())


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_scrape_settings() -> ScrapeSettings:
    """
    Return cached scrape settings from environment variables.
    """

    load_env_files()
    targets_path = _get_str_env("SCRAPE_TARGETS_PATH", "app/scraping/config/targets.json")
    default_limit = max(1, get_int_env("ITEMS_DEFAULT_LIMIT", 50))
    return ScrapeSettings(
        targets_path=str(_resolve_config_path(targets_path)),
        default_target=_get_str_env("SCRAPE_DEFAULT_TARGET", "books_toscrape").lower(),
        user_agent=_get_str_env(
            "SCRAPE_USER_AGENT",
            "PageHarvestBot/1.0 (+https://example.com/bot)",
        ),
        timeout_seconds=min(
            MAX_TIMEOUT_SECONDS,
            max(1.0, _get_float_env("SCRAPE_TIMEOUT_SECONDS", MAX_TIMEOUT_SECONDS)),
        ),
        admin_identities=_get_csv_env("SCRAPE_ADMIN_IDENTITIES"),
        default_list_limit=default_limit,
        max_list_limit=max(default_limit, get_int_env("ITEMS_MAX_LIMIT", 500)),
    )


def load_scrape_targets(*, targets_path: str) -> dict[str, ScrapeConfig]:
    """
    Load named scrape targets from a JSON file.
    """

    path = _resolve_config_path(targets_path)
    if not path.exists():
        raise FileNotFoundError(f"Scrape targets file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    targets = raw_data.get("targets", []) if isinstance(raw_data, dict) else None
    if not isinstance(targets, list):
        raise ValueError("Invalid scrape targets file: 'targets' must be a list.")

    parsed: dict[str, ScrapeConfig] = {}
    for entry in targets:
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("name", "")).strip().lower()
        if not name:
            continue
        try:
            parsed[name] = ScrapeConfig.from_mapping(entry)
        except InvalidScrapeConfig as exc:
            raise ValueError(f"Invalid scrape target '{name}': {exc}") from exc
    return parsed


def resolve_scrape_config(
    *,
    settings: ScrapeSettings,
    config: Mapping[str, object] | None = None,
    target: str | None = None,
) -> ScrapeConfig:
    """
    Pick the inline config, else the named target, else the default target.
    """

    if config is not None:
        return ScrapeConfig.from_mapping(config)

    name = (target or settings.default_target).strip().lower()
    targets = load_scrape_targets(targets_path=settings.targets_path)
    resolved = targets.get(name)
    if resolved is None:
        allowed = ", ".join(sorted(targets)) or "none"
        raise ValueError(f"Unknown scrape target '{name}'. Configured targets: {allowed}.")
    return resolved
