import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.constants import LOOKUP_FAILED_MESSAGE
from app.core.errors import DependencyError
from app.models.reference import Brand, Category, ProductType, Size
from app.schemas.catalog import BrandRead, CategoryRead, ProductTypeRead, SizeRead
from app.services import catalog_queries

logger = logging.getLogger(__name__)


def _load(db: Session, model, schema, label: str):
    try:
        rows = catalog_queries.fetch_reference_rows(db, model)
    except SQLAlchemyError as exc:
        logger.exception("Loading %s failed", label)
        raise DependencyError(LOOKUP_FAILED_MESSAGE.format(label)) from exc
    return [schema.model_validate(row) for row in rows]


def list_categories(db: Session) -> list[CategoryRead]:
    return _load(db, Category, CategoryRead, "categories")


def list_brands(db: Session) -> list[BrandRead]:
    return _load(db, Brand, BrandRead, "brands")


def list_types(db: Session) -> list[ProductTypeRead]:
    return _load(db, ProductType, ProductTypeRead, "types")


def list_sizes(db: Session) -> list[SizeRead]:
    return _load(db, Size, SizeRead, "sizes")


__all__ = ["list_brands", "list_categories", "list_sizes", "list_types"]
