"""
app/api/routers package marker.
"""

from app.api.routers.items import router as items_router
from app.api.routers.scraping import router as scraping_router

__all__ = [
    "items_router",
    "scraping_router",
]
