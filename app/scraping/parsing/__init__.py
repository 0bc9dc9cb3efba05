"""
HTML parsing exports.
"""

from app.scraping.parsing.extractor import HTMLItemExtractor, extract

__all__ = ["HTMLItemExtractor", "extract"]
