from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    id: int
    code: str
    name: str
    description: str = ""
    price: Decimal
    sale: Decimal = Decimal("0")
    category: str
    type: str
    brand: str


class ProductSummary(ProductBase):
    average_rating: float = 0.0
    sizes: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class ProductImageRead(BaseModel):
    url: str
    alt_text: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductReviewRead(BaseModel):
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductDetail(ProductBase):
    created_at: datetime
    updated_at: datetime
    sizes: List[str] = Field(default_factory=list)
    images: List[ProductImageRead] = Field(default_factory=list)
    reviews: List[ProductReviewRead] = Field(default_factory=list)


class ProductCreate(BaseModel):
    code: str
    name: str
    description: str = ""
    price: Decimal
    discount_percent: Decimal = Decimal("0")
    category_id: int
    type_id: int
    brand_id: int
    size_ids: List[int] = Field(default_factory=list)


class ProductCreated(BaseModel):
    message: str
    id: int
