from app.routers.catalog import router as catalog_router
from app.routers.health import router as health_router
from app.routers.products import router as products_router
from app.routers.uploads import router as uploads_router

__all__ = [
    "catalog_router",
    "health_router",
    "products_router",
    "uploads_router",
]
