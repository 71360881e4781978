import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from app.core.logging import setup_logging
from app.database import init_schema
from app.routers import (
    catalog_router,
    health_router,
    products_router,
    uploads_router,
)
from app.services.storage_service import get_storage

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

storage = get_storage()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    storage.ensure_root()
    init_schema()
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.mount(
    storage.url_prefix,
    StaticFiles(directory=str(storage.root), check_dir=False),
    name="uploads",
)

app.include_router(health_router)
app.include_router(products_router)
app.include_router(catalog_router)
app.include_router(uploads_router)


__all__ = ["app"]
