"""
app/services package marker.
"""

from app.services.scraping_service import ScrapingService, get_scraping_service

__all__ = ["ScrapingService", "get_scraping_service"]
