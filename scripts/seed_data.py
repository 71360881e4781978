import argparse
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import delete, select

from app.core.logging import setup_logging
from app.database import SessionLocal, engine, init_schema
from app.models import (
    Brand,
    Category,
    Product,
    ProductImage,
    ProductReview,
    ProductType,
    Size,
    product_sizes,
)
from app.services import catalog_queries

logger = logging.getLogger("seed_data")


def parse_args():
    parser = argparse.ArgumentParser(description="Seed catalog reference data and a sample product.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    init_schema(engine)

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(ProductReview))
            db.execute(delete(ProductImage))
            db.execute(delete(product_sizes))
            db.execute(delete(Product))
            for model in (Size, Brand, ProductType, Category):
                db.execute(delete(model))
            db.commit()

        has_category = db.execute(select(Category.id).limit(1)).first()
        if has_category:
            logger.info("Seed skipped: categories already exist.")
            return

        categories = [Category(name="Men"), Category(name="Women"), Category(name="Kids")]
        types = [ProductType(name="Sneakers"), ProductType(name="T-Shirt"), ProductType(name="Hoodie")]
        brands = [Brand(name="Nike"), Brand(name="Adidas"), Brand(name="Puma")]
        sizes = [Size(label=label) for label in ("XS", "S", "M", "L", "XL")]
        db.add_all(categories + types + brands + sizes)
        db.flush()

        product_id = catalog_queries.insert_product(
            db,
            code="TS-0001",
            name="Basic Tee",
            description="Cotton crew neck t-shirt.",
            price=Decimal("19.99"),
            discount_percent=Decimal("10"),
            category_id=categories[0].id,
            type_id=types[1].id,
            brand_id=brands[0].id,
            created_at=datetime.now(timezone.utc),
        )
        catalog_queries.insert_product_sizes(db, product_id, [sizes[1].id, sizes[2].id, sizes[3].id])

        now = datetime.now(timezone.utc)
        db.add_all(
            [
                ProductReview(product_id=product_id, rating=5, comment="Great fit.", created_at=now - timedelta(days=3)),
                ProductReview(product_id=product_id, rating=4, comment="Soft fabric.", created_at=now - timedelta(days=1)),
            ]
        )
        db.commit()
        logger.info("Seed data created (sample product %s).", product_id)
    finally:
        db.close()


if __name__ == "__main__":
    main()
