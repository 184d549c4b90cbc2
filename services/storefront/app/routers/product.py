from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import structlog
from fastapi import APIRouter, Depends, HTTPException
from services.storefront.app.db.deps import get_db
from services.storefront.app.db.models import Product
from services.storefront.app.models.product import (
    MessageResponse,
    ProductIn,
    ProductMutationResponse,
    ProductOut,
    ProductUpdate,
)
from services.storefront.app.services.sql_stores import product_to_out
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/addProduct", response_model=ProductMutationResponse)
def add_product(payload: ProductIn, db: Session = Depends(get_db)) -> ProductMutationResponse:
    now = datetime.utcnow()
    product = Product(id=uuid4().hex, created_at=now, updated_at=now, **payload.model_dump())
    db.add(product)
    db.commit()

    logger.info("Product added", product_id=product.id)
    return ProductMutationResponse(message="Product added successfully", data=product_to_out(product))


@router.get("/getProductById/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)) -> ProductOut:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_to_out(product)


@router.put("/editProduct/{product_id}", response_model=ProductMutationResponse)
def edit_product(
    product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)
) -> ProductMutationResponse:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)
    product.updated_at = datetime.utcnow()
    db.commit()

    logger.info("Product updated", product_id=product_id)
    return ProductMutationResponse(
        message="Product updated successfully", data=product_to_out(product)
    )


@router.delete("/deleteProduct/{product_id}", response_model=MessageResponse)
def delete_product(product_id: str, db: Session = Depends(get_db)) -> MessageResponse:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    db.delete(product)
    db.commit()

    logger.info("Product deleted", product_id=product_id)
    return MessageResponse(message="Product deleted successfully")
