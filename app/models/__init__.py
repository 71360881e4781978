import importlib

from app.models.product import Product, ProductImage, ProductReview, product_sizes
from app.models.reference import Brand, Category, ProductType, Size


def import_all_models() -> None:
    for module_name in (
        "app.models.reference",
        "app.models.product",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Brand",
    "Category",
    "Product",
    "ProductImage",
    "ProductReview",
    "ProductType",
    "Size",
    "import_all_models",
    "product_sizes",
]
