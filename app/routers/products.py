from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.core.constants import (
    PRODUCT_CREATED_MESSAGE,
    PRODUCT_IMAGE_LIST_FIELD,
    PRODUCT_SIZE_LIST_FIELD,
)
from app.core.errors import CatalogError
from app.dependencies import get_db, get_storage
from app.schemas.product import ProductCreated, ProductDetail, ProductSummary
from app.services.product_service import (
    create_product,
    get_product_detail,
    list_products,
    parse_product_form,
)
from app.services.storage_service import LocalFileStorage

router = APIRouter(tags=["Products"])


@router.get("/products", response_model=list[ProductSummary])
def get_products(db: Session = Depends(get_db)):
    try:
        return list_products(db)
    except CatalogError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/products/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return get_product_detail(db, product_id)
    except CatalogError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.post("/createProduct", response_model=ProductCreated, status_code=201)
def create_product_endpoint(
    code: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    discount_percent: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    type_id: Optional[str] = Form(None, alias="typeId"),
    brand_id: Optional[str] = Form(None, alias="brandId"),
    sizes: Optional[List[str]] = Form(None),
    sizes_list: Optional[List[str]] = Form(None, alias=PRODUCT_SIZE_LIST_FIELD),
    images: Optional[List[UploadFile]] = File(None),
    images_list: Optional[List[UploadFile]] = File(None, alias=PRODUCT_IMAGE_LIST_FIELD),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    fields = {
        "code": code,
        "name": name,
        "description": description,
        "price": price,
        "discount_percent": discount_percent,
        "categoryId": category_id,
        "typeId": type_id,
        "brandId": brand_id,
    }
    uploads = [
        (upload.filename, upload.file)
        for upload in (images or []) + (images_list or [])
        if upload.filename
    ]
    try:
        payload = parse_product_form(fields, (sizes or []) + (sizes_list or []))
        product_id = create_product(db, payload, uploads=uploads, storage=storage)
    except CatalogError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return ProductCreated(message=PRODUCT_CREATED_MESSAGE, id=product_id)


__all__ = ["router"]
