"""
Pydantic schemas for the customer directory
Project: Invoicer (Estimates & Invoices backend)
"""

import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CustomerBase(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None

    @field_validator("name", "company", "email", "phone", "address", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip()


class CustomerUpsert(CustomerBase):
    """
    Create-or-update by (name, company) within the caller's directory.

    At least one of name and company is required.
    """

    @model_validator(mode="after")
    def require_name_or_company(self) -> "CustomerUpsert":
        if not self.name and not self.company:
            raise ValueError("At least a name or company is required")
        return self


class CustomerUpdate(CustomerBase):
    """Partial update: omitted fields keep their value."""
    pass


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
