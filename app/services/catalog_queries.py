"""Parameterized reads and writes over the catalog tables.

Every function takes the caller's ``Session`` and leaves transaction control
to the caller.
"""

from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.database.batch import BatchInsert
from app.models.product import Product, ProductImage, ProductReview, product_sizes
from app.models.reference import Brand, Category, ProductType, Size


def _product_columns():
    return (
        Product.id,
        Product.code,
        Product.name,
        Product.description,
        Product.price,
        Product.discount_percent,
        Category.name.label("category"),
        ProductType.name.label("type"),
        Brand.name.label("brand"),
    )


def _join_reference_names(stmt):
    return (
        stmt.join(Category, Product.category_id == Category.id)
        .join(ProductType, Product.type_id == ProductType.id)
        .join(Brand, Product.brand_id == Brand.id)
    )


# ------------------------------------------------------------------
# List view
# ------------------------------------------------------------------

def fetch_product_summary_rows(db: Session):
    """One row per product with its reference names and review average.

    The average comes from a per-product subquery, so it never sees the row
    multiplication of the size and image joins.
    """
    review_stats = (
        select(
            ProductReview.product_id.label("product_id"),
            func.avg(ProductReview.rating).label("average_rating"),
        )
        .group_by(ProductReview.product_id)
        .subquery()
    )
    stmt = _join_reference_names(
        select(*_product_columns(), review_stats.c.average_rating).select_from(Product)
    )
    stmt = stmt.outerjoin(review_stats, review_stats.c.product_id == Product.id).order_by(
        Product.id
    )
    return db.execute(stmt).mappings().all()


def fetch_distinct_size_labels(db: Session):
    stmt = (
        select(product_sizes.c.product_id, Size.label)
        .select_from(product_sizes)
        .join(Size, product_sizes.c.size_id == Size.id)
        .distinct()
        .order_by(product_sizes.c.product_id, Size.label)
    )
    return db.execute(stmt).all()


def fetch_distinct_image_urls(db: Session):
    stmt = (
        select(ProductImage.product_id, ProductImage.url)
        .distinct()
        .order_by(ProductImage.product_id, ProductImage.url)
    )
    return db.execute(stmt).all()


# ------------------------------------------------------------------
# Detail view
# ------------------------------------------------------------------

def fetch_product_row(db: Session, product_id: int):
    stmt = _join_reference_names(
        select(*_product_columns(), Product.created_at, Product.updated_at).select_from(Product)
    ).where(Product.id == product_id)
    return db.execute(stmt).mappings().first()


def fetch_product_size_labels(db: Session, product_id: int) -> list[str]:
    stmt = (
        select(Size.label)
        .select_from(product_sizes)
        .join(Size, product_sizes.c.size_id == Size.id)
        .where(product_sizes.c.product_id == product_id)
        .order_by(product_sizes.c.id)
    )
    return list(db.execute(stmt).scalars().all())


def fetch_product_images(db: Session, product_id: int) -> list[ProductImage]:
    stmt = (
        select(ProductImage)
        .where(ProductImage.product_id == product_id)
        .order_by(ProductImage.id)
    )
    return list(db.execute(stmt).scalars().all())


def fetch_product_reviews(db: Session, product_id: int) -> list[ProductReview]:
    # Newest first; reviews sharing a timestamp fall back to newest id first.
    stmt = (
        select(ProductReview)
        .where(ProductReview.product_id == product_id)
        .order_by(ProductReview.created_at.desc(), ProductReview.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


# ------------------------------------------------------------------
# Reference data
# ------------------------------------------------------------------

def fetch_reference_rows(db: Session, model) -> list:
    return list(db.execute(select(model).order_by(model.id)).scalars().all())


def find_missing_ids(db: Session, model, ids: Iterable[int]) -> list[int]:
    wanted = set(ids)
    if not wanted:
        return []
    found = set(db.execute(select(model.id).where(model.id.in_(wanted))).scalars().all())
    return sorted(wanted - found)


# ------------------------------------------------------------------
# Writes
# ------------------------------------------------------------------

def insert_product(
    db: Session,
    *,
    code: str,
    name: str,
    description: str,
    price,
    discount_percent,
    category_id: int,
    type_id: int,
    brand_id: int,
    created_at: datetime,
) -> int:
    product = Product(
        code=code,
        name=name,
        description=description,
        price=price,
        discount_percent=discount_percent,
        category_id=category_id,
        type_id=type_id,
        brand_id=brand_id,
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(product)
    db.flush()
    return product.id


def insert_product_sizes(db: Session, product_id: int, size_ids: Sequence[int]) -> int:
    batch = BatchInsert(product_sizes, ("product_id", "size_id"))
    batch.extend((product_id, size_id) for size_id in size_ids)
    return batch.execute(db)


def insert_product_images(
    db: Session,
    product_id: int,
    images: Sequence[tuple[str, str]],
) -> int:
    """Insert ``(url, alt_text)`` pairs for ``product_id``."""
    batch = BatchInsert(ProductImage.__table__, ("product_id", "url", "alt_text"))
    batch.extend((product_id, url, alt_text) for url, alt_text in images)
    return batch.execute(db)


__all__ = [
    "fetch_distinct_image_urls",
    "fetch_distinct_size_labels",
    "fetch_product_images",
    "fetch_product_reviews",
    "fetch_product_row",
    "fetch_product_size_labels",
    "fetch_product_summary_rows",
    "fetch_reference_rows",
    "find_missing_ids",
    "insert_product",
    "insert_product_images",
    "insert_product_sizes",
]
