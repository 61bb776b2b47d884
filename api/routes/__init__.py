"""API route modules."""

from .ingest import router as ingest_router
from .recommendations import admin_router as recommendation_admin_router
from .recommendations import router as recommendation_router

__all__ = [
    "ingest_router",
    "recommendation_router",
    "recommendation_admin_router",
]
