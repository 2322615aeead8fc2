"""
app/api/routers package marker.
"""

from app.api.routers.batch_import import router as batch_import_router
from app.api.routers.dashboard import router as dashboard_router
from app.api.routers.export import router as export_router
from app.api.routers.snapshots import router as snapshots_router
from app.api.routers.streamers import router as streamers_router

__all__ = [
    "batch_import_router",
    "dashboard_router",
    "export_router",
    "snapshots_router",
    "streamers_router",
]
