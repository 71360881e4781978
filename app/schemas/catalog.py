from pydantic import BaseModel, ConfigDict


class NamedRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryRead(NamedRead):
    pass


class BrandRead(NamedRead):
    pass


class ProductTypeRead(NamedRead):
    pass


class SizeRead(BaseModel):
    id: int
    label: str

    model_config = ConfigDict(from_attributes=True)


class UploadRead(BaseModel):
    url: str
    filename: str
