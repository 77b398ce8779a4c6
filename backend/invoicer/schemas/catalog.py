"""
Pydantic schemas for the product catalog
Project: Invoicer (Estimates & Invoices backend)
"""

import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VariationBase(BaseModel):
    size: Optional[str] = Field(None, max_length=100)
    accessory: Optional[str] = Field(None, max_length=255)
    quantity: Optional[str] = Field(None, max_length=50, description="Pack quantity label")


class VariationCreate(VariationBase):
    """New variation of a product. The price is required."""

    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class VariationPriceUpdate(BaseModel):
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class VariationRead(VariationBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    price: Decimal
    archived: bool = False


class ProductRead(BaseModel):
    """Catalog product with the caller's visible variations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    base_price: Optional[Decimal] = None
    example_image: Optional[str] = None
    variations: List[VariationRead] = Field(default_factory=list)


class SeedResult(BaseModel):
    """Outcome of copying the default catalog to a user."""

    copied: int = Field(..., ge=0, description="Variations copied")
