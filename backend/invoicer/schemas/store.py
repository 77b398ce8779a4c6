"""
Pydantic schemas for the store settings
Project: Invoicer (Estimates & Invoices backend)
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StoreSettingsUpdate(BaseModel):
    """
    Upsert of the caller's store settings.

    Omitted fields keep their current value. The tax rate is a fraction
    (0.06 for 6%).
    """

    name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    tax_rate: Optional[Decimal] = Field(
        None,
        ge=0,
        le=1,
        validation_alias=AliasChoices("tax_rate", "taxRate"),
    )

    @field_validator("tax_rate", mode="before")
    @classmethod
    def comma_decimal(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().replace(",", ".")
            return v or None
        return v


class StoreSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_rate: Decimal
