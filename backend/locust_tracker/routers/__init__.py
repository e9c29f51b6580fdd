"""API routers."""
from .ingest import router as ingest_router
from .dashboard import router as dashboard_router
from .push import router as push_router

__all__ = ["ingest_router", "dashboard_router", "push_router"]
