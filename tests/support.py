from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from app.database import Base, create_catalog_engine
from app.models import (
    Brand,
    Category,
    Product,
    ProductImage,
    ProductReview,
    ProductType,
    Size,
    import_all_models,
    product_sizes,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_database():
    import_all_models()
    engine = create_catalog_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return engine, Session


def seed_reference(db) -> dict:
    category = Category(name="Men")
    product_type = ProductType(name="T-Shirt")
    brand = Brand(name="Nike")
    sizes = {label: Size(label=label) for label in ("S", "M", "L")}
    db.add_all([category, product_type, brand, *sizes.values()])
    db.commit()
    return {
        "category_id": category.id,
        "type_id": product_type.id,
        "brand_id": brand.id,
        "sizes": {label: size.id for label, size in sizes.items()},
    }


def add_product(db, refs, code, *, sizes=(), images=(), ratings=(), price="10.00"):
    product = Product(
        code=code,
        name="Product {}".format(code),
        description="",
        price=Decimal(price),
        discount_percent=Decimal("0"),
        category_id=refs["category_id"],
        type_id=refs["type_id"],
        brand_id=refs["brand_id"],
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
    db.add(product)
    db.flush()
    for label in sizes:
        db.execute(
            product_sizes.insert().values(product_id=product.id, size_id=refs["sizes"][label])
        )
    for url in images:
        db.add(ProductImage(product_id=product.id, url=url, alt_text=url.rsplit("/", 1)[-1]))
    for offset, rating in enumerate(ratings):
        db.add(
            ProductReview(
                product_id=product.id,
                rating=rating,
                comment="review {}".format(offset),
                created_at=BASE_TIME + timedelta(hours=offset),
            )
        )
    db.commit()
    return product.id


def count_rows(db) -> dict:
    return {
        "products": db.execute(select(func.count()).select_from(Product)).scalar_one(),
        "product_sizes": db.execute(select(func.count()).select_from(product_sizes)).scalar_one(),
        "product_images": db.execute(select(func.count()).select_from(ProductImage)).scalar_one(),
    }
