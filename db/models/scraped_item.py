"""
db/models/scraped_item.py

One scraped page item, keyed by an id derived from its URL.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class ScrapedItem(Base):
    __tablename__ = "scraped_items"

    id: Mapped[str] = mapped_column(
        String(2048),
        primary_key=True,
        comment="URL with non-alphanumeric characters replaced by '_'",
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Raw price text as shown on the page",
    )
    source: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Host of the item URL",
    )
    scraped_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Refreshed on every successful re-scrape",
    )
    first_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_scraped_items_scraped_at", "scraped_at"),
        Index("ix_scraped_items_source", "source"),
    )
