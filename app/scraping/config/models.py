"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScrapeSettings:
    """
    Runtime settings for the scrape pipeline and item reads.
    """

    targets_path: str
    default_target: str
    user_agent: str
    timeout_seconds: float
    admin_identities: frozenset[str] = field(default_factory=frozenset)
    default_list_limit: int = 50
    max_list_limit: int = 500
