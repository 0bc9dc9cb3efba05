"""
Config helpers for the scrape pipeline.
"""

from app.scraping.config.loader import get_scrape_settings, load_scrape_targets, resolve_scrape_config
from app.scraping.config.models import ScrapeSettings

__all__ = [
    "ScrapeSettings",
    "get_scrape_settings",
    "load_scrape_targets",
    "resolve_scrape_config",
]
