from pathlib import Path


APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent

UPLOAD_FORM_FIELD = "image"
PRODUCT_IMAGE_LIST_FIELD = "images[]"
PRODUCT_SIZE_LIST_FIELD = "sizes[]"

# Largest id a 64-bit integer primary key can hold.
MAX_ROW_ID = 2**63 - 1

REQUIRED_PRODUCT_FIELDS = ("code", "name", "price", "categoryId", "typeId", "brandId")

PRODUCT_CREATED_MESSAGE = "Product created"
PRODUCT_NOT_FOUND_MESSAGE = "Product not found."
PRODUCT_LIST_FAILED_MESSAGE = "Failed to load products."
PRODUCT_DETAIL_FAILED_MESSAGE = "Failed to load product details."
PRODUCT_CREATE_FAILED_MESSAGE = "Failed to create product."
LOOKUP_FAILED_MESSAGE = "Failed to load {}."
UPLOAD_MISSING_MESSAGE = "No file uploaded."
UPLOAD_FAILED_MESSAGE = "Failed to store uploaded file."
