"""
Route aggregator — mounts all routers under /api/v1 prefix.

Health is exported separately for main.py to mount at root.
"""
from fastapi import APIRouter

from fitment_hub.routes.fields import router as fields_router
from fitment_hub.routes.fitment_sets import router as fitment_sets_router
from fitment_hub.routes.tags import router as tags_router
from fitment_hub.routes.catalog import router as catalog_router
from fitment_hub.routes.health import router as health_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(fields_router)
v1_router.include_router(fitment_sets_router)
v1_router.include_router(tags_router)
v1_router.include_router(catalog_router)

__all__ = ["v1_router", "health_router"]
