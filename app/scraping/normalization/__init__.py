"""
Normalization layer exports.
"""

from app.scraping.normalization.identity import ItemNormalizer, ItemUpsert, derive_item_id, source_for

__all__ = ["ItemNormalizer", "ItemUpsert", "derive_item_id", "source_for"]
