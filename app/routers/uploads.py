from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.core.constants import UPLOAD_FORM_FIELD, UPLOAD_MISSING_MESSAGE
from app.core.errors import CatalogError
from app.dependencies import get_storage
from app.schemas.catalog import UploadRead
from app.services.storage_service import LocalFileStorage

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadRead)
def upload_image(
    image: Optional[UploadFile] = File(None, alias=UPLOAD_FORM_FIELD),
    storage: LocalFileStorage = Depends(get_storage),
):
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail=UPLOAD_MISSING_MESSAGE)
    try:
        stored = storage.save(image.filename, image.file)
    except CatalogError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return UploadRead(url=stored.url, filename=stored.filename)


__all__ = ["router"]
