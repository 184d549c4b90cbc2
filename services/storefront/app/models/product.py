from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# Catalog payloads keep the snake_case product_* keys the storefront clients already send.


class ProductIn(BaseModel):
    product_name: str = Field(..., min_length=1)
    product_description: str = ""
    product_price: int = Field(..., ge=0)
    product_category: str = ""
    product_brand: str = ""
    product_image: str = ""


class ProductUpdate(BaseModel):
    product_name: str | None = Field(default=None, min_length=1)
    product_description: str | None = None
    product_price: int | None = Field(default=None, ge=0)
    product_category: str | None = None
    product_brand: str | None = None
    product_image: str | None = None


class ProductOut(BaseModel):
    id: str
    product_name: str
    product_description: str
    product_price: int
    product_category: str
    product_brand: str
    product_image: str
    created_at: datetime
    updated_at: datetime


class ProductMutationResponse(BaseModel):
    message: str
    data: ProductOut


class MessageResponse(BaseModel):
    message: str
