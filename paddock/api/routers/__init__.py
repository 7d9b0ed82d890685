"""API routers for different resource types."""

from paddock.api.routers.assets import router as assets_router
from paddock.api.routers.leagues import router as leagues_router
from paddock.api.routers.races import router as races_router
from paddock.api.routers.rosters import router as rosters_router

__all__ = [
    "assets_router",
    "leagues_router",
    "races_router",
    "rosters_router",
]
