from app.services import catalog_queries
from app.services.catalog_service import list_brands, list_categories, list_sizes, list_types
from app.services.product_service import create_product, get_product_detail, list_products
from app.services.storage_service import LocalFileStorage, get_storage

__all__ = [
    "LocalFileStorage",
    "catalog_queries",
    "create_product",
    "get_product_detail",
    "get_storage",
    "list_brands",
    "list_categories",
    "list_products",
    "list_sizes",
    "list_types",
]
