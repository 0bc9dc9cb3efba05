"""
Storage layer exports.
"""

from app.scraping.storage.base import ItemStore
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyItemStore

__all__ = ["ItemStore", "SQLAlchemyItemStore"]
