from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import CatalogError
from app.dependencies import get_db
from app.schemas.catalog import BrandRead, CategoryRead, ProductTypeRead, SizeRead
from app.services import catalog_service

router = APIRouter(tags=["Catalog"])


def _run(loader, db: Session):
    try:
        return loader(db)
    except CatalogError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return _run(catalog_service.list_categories, db)


@router.get("/brands", response_model=list[BrandRead])
def list_brands(db: Session = Depends(get_db)):
    return _run(catalog_service.list_brands, db)


@router.get("/types", response_model=list[ProductTypeRead])
def list_types(db: Session = Depends(get_db)):
    return _run(catalog_service.list_types, db)


@router.get("/sizes", response_model=list[SizeRead])
def list_sizes(db: Session = Depends(get_db)):
    return _run(catalog_service.list_sizes, db)


__all__ = ["router"]
