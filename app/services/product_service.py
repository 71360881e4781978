import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import BinaryIO, Iterable, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.constants import (
    MAX_ROW_ID,
    PRODUCT_CREATE_FAILED_MESSAGE,
    PRODUCT_DETAIL_FAILED_MESSAGE,
    PRODUCT_LIST_FAILED_MESSAGE,
    PRODUCT_NOT_FOUND_MESSAGE,
    REQUIRED_PRODUCT_FIELDS,
)
from app.core.errors import CatalogError, DependencyError, NotFoundError, ValidationError
from app.models.reference import Brand, Category, ProductType, Size
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductImageRead,
    ProductReviewRead,
    ProductSummary,
)
from app.services import catalog_queries
from app.services.storage_service import LocalFileStorage, StoredFile

logger = logging.getLogger(__name__)

_RATING_STEP = Decimal("0.1")


def round_rating(value) -> float:
    """Round an average rating to one decimal, halves away from zero."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(_RATING_STEP, rounding=ROUND_HALF_UP))


def _group_values(pairs) -> dict[int, list]:
    grouped: dict[int, list] = {}
    for product_id, value in pairs:
        if value is None:
            continue
        values = grouped.setdefault(product_id, [])
        if value not in values:
            values.append(value)
    return grouped


def _base_fields(row) -> dict:
    return {
        "id": row["id"],
        "code": row["code"],
        "name": row["name"],
        "description": row["description"] or "",
        "price": row["price"],
        "sale": row["discount_percent"] if row["discount_percent"] is not None else Decimal("0"),
        "category": row["category"],
        "type": row["type"],
        "brand": row["brand"],
    }


# ------------------------------------------------------------------
# Reads
# ------------------------------------------------------------------

def list_products(db: Session) -> list[ProductSummary]:
    try:
        rows = catalog_queries.fetch_product_summary_rows(db)
        sizes = _group_values(catalog_queries.fetch_distinct_size_labels(db))
        images = _group_values(catalog_queries.fetch_distinct_image_urls(db))
    except SQLAlchemyError as exc:
        logger.exception("Loading the product list failed")
        raise DependencyError(PRODUCT_LIST_FAILED_MESSAGE) from exc

    return [
        ProductSummary(
            **_base_fields(row),
            average_rating=round_rating(row["average_rating"]),
            sizes=sorted(sizes.get(row["id"], [])),
            images=sorted(images.get(row["id"], [])),
        )
        for row in rows
    ]


def get_product_detail(db: Session, product_id: int) -> ProductDetail:
    if not 1 <= product_id <= MAX_ROW_ID:
        raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)
    try:
        row = catalog_queries.fetch_product_row(db, product_id)
        if row is None:
            raise NotFoundError(PRODUCT_NOT_FOUND_MESSAGE)
        sizes = catalog_queries.fetch_product_size_labels(db, product_id)
        images = catalog_queries.fetch_product_images(db, product_id)
        reviews = catalog_queries.fetch_product_reviews(db, product_id)
    except SQLAlchemyError as exc:
        logger.exception("Loading product %s failed", product_id)
        raise DependencyError(PRODUCT_DETAIL_FAILED_MESSAGE) from exc

    return ProductDetail(
        **_base_fields(row),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        sizes=sizes,
        images=[ProductImageRead.model_validate(image) for image in images],
        reviews=[ProductReviewRead.model_validate(review) for review in reviews],
    )


# ------------------------------------------------------------------
# Create
# ------------------------------------------------------------------

def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_decimal(field: str, value) -> Decimal:
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("{} must be a number.".format(field), fields=[field]) from exc
    if not parsed.is_finite():
        raise ValidationError("{} must be a number.".format(field), fields=[field])
    return parsed


def _parse_int(field: str, value) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValidationError("{} must be an integer.".format(field), fields=[field]) from exc
    if not 1 <= parsed <= MAX_ROW_ID:
        raise ValidationError("{} is not a valid id.".format(field), fields=[field])
    return parsed


def _split_size_values(values: Iterable) -> list[str]:
    entries = []
    for value in values:
        if value is None:
            continue
        for entry in str(value).split(","):
            entry = entry.strip()
            if entry:
                entries.append(entry)
    return entries


def parse_product_form(
    fields: Mapping[str, Optional[str]],
    size_values: Iterable = (),
) -> ProductCreate:
    """Validate raw form values without touching the datastore."""
    missing = [name for name in REQUIRED_PRODUCT_FIELDS if _is_blank(fields.get(name))]
    if missing:
        raise ValidationError(
            "Missing required fields: {}".format(", ".join(missing)),
            fields=missing,
        )

    price = _parse_decimal("price", fields["price"])
    if price < 0:
        raise ValidationError("price must be non-negative.", fields=["price"])

    discount_raw = fields.get("discount_percent")
    discount = Decimal("0") if _is_blank(discount_raw) else _parse_decimal("discount_percent", discount_raw)
    if discount < 0 or discount > 100:
        raise ValidationError(
            "discount_percent must be between 0 and 100.",
            fields=["discount_percent"],
        )

    description = fields.get("description")
    return ProductCreate(
        code=str(fields["code"]).strip(),
        name=str(fields["name"]).strip(),
        description="" if description is None else str(description),
        price=price,
        discount_percent=discount,
        category_id=_parse_int("categoryId", fields["categoryId"]),
        type_id=_parse_int("typeId", fields["typeId"]),
        brand_id=_parse_int("brandId", fields["brandId"]),
        size_ids=[_parse_int("sizes", entry) for entry in _split_size_values(size_values)],
    )


def _check_references(db: Session, payload: ProductCreate) -> None:
    problems = {}
    for label, model, ids in (
        ("categoryId", Category, [payload.category_id]),
        ("typeId", ProductType, [payload.type_id]),
        ("brandId", Brand, [payload.brand_id]),
        ("sizes", Size, payload.size_ids),
    ):
        missing = catalog_queries.find_missing_ids(db, model, ids)
        if missing:
            problems[label] = ", ".join(str(value) for value in missing)
    if problems:
        raise ValidationError(
            "Unknown references: {}".format(
                "; ".join("{} {}".format(label, ids) for label, ids in problems.items())
            ),
            fields=list(problems),
        )


def store_uploads(
    storage: LocalFileStorage,
    uploads: Sequence[tuple[Optional[str], BinaryIO]],
) -> list[StoredFile]:
    return [storage.save(original_name, source) for original_name, source in uploads]


def create_product(
    db: Session,
    payload: ProductCreate,
    *,
    uploads: Sequence[tuple[Optional[str], BinaryIO]] = (),
    storage: Optional[LocalFileStorage] = None,
) -> int:
    """Create a product with its size links and images in one transaction.

    References are checked before any file is written. Stored files stay on
    disk if the transaction later rolls back; everything written to the
    database is committed together or not at all.
    """
    if uploads and storage is None:
        raise ValueError("storage is required when uploads are given")

    stored: list[StoredFile] = []
    now = datetime.now(timezone.utc)
    try:
        _check_references(db, payload)
        if uploads:
            stored = store_uploads(storage, uploads)
        product_id = catalog_queries.insert_product(
            db,
            code=payload.code,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            discount_percent=payload.discount_percent,
            category_id=payload.category_id,
            type_id=payload.type_id,
            brand_id=payload.brand_id,
            created_at=now,
        )
        if payload.size_ids:
            catalog_queries.insert_product_sizes(db, product_id, payload.size_ids)
        if stored:
            catalog_queries.insert_product_images(
                db,
                product_id,
                [(item.url, item.filename) for item in stored],
            )
        db.commit()
    except CatalogError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Creating product %s failed; transaction rolled back",
            payload.code,
            extra={"product_code": payload.code, "stored_files": [item.filename for item in stored]},
        )
        raise DependencyError(PRODUCT_CREATE_FAILED_MESSAGE) from exc

    logger.info(
        "Created product %s (%s) with %d size link(s) and %d image(s)",
        product_id,
        payload.code,
        len(payload.size_ids),
        len(stored),
    )
    return product_id


__all__ = [
    "create_product",
    "get_product_detail",
    "list_products",
    "parse_product_form",
    "round_rating",
    "store_uploads",
]
