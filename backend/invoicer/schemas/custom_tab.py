"""
Pydantic schemas for custom tabs
Project: Invoicer (Estimates & Invoices backend)
"""

import uuid
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoicer.services.line_resolver import parse_bool, parse_price


class TabVariation(BaseModel):
    """Template of one custom line inside a tab."""

    model_config = ConfigDict(extra="ignore")

    size: Optional[str] = Field(None, max_length=100)
    accessory: Optional[str] = Field(None, max_length=255)
    quantity: Optional[str] = Field(None, max_length=50, description="Pack quantity label")
    price: Optional[Decimal] = None

    @field_validator("size", "accessory", "quantity", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Optional[Decimal]:
        price = parse_price(v)
        if price is None:
            return None
        return max(price, Decimal("0"))


class CustomTabCreate(BaseModel):
    name: str = Field(..., max_length=200)
    description: str = ""
    variations: List[TabVariation] = Field(default_factory=list)
    taxable: bool = Field(True, description="Default taxable flag of the tab lines")

    @field_validator("name", mode="before")
    @classmethod
    def require_name(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise ValueError("Tab name is required")
        return str(v).strip()

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("variations", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("taxable", mode="before")
    @classmethod
    def coerce_taxable(cls, v: Any) -> bool:
        parsed = parse_bool(v)
        return True if parsed is None else parsed


class CustomTabUpdate(BaseModel):
    """Partial update: omitted (or blank name) fields keep their value."""

    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    variations: Optional[List[TabVariation]] = None
    taxable: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def blank_name(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("taxable", mode="before")
    @classmethod
    def coerce_taxable(cls, v: Any) -> Optional[bool]:
        return parse_bool(v)


class CustomTabRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str = ""
    taxable: bool = True
    variations: List[TabVariation] = Field(default_factory=list)
