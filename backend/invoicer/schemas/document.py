"""
Pydantic schemas for estimates and invoices
Project: Invoicer (Estimates & Invoices backend)

Request schemas parse the loose client input once (quantities, prices,
taxable flags, customer info given as a JSON string) so the services
only see typed values where `None` means "not provided".
"""

import datetime
import json
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from invoicer.core.config import settings
from invoicer.core.exceptions import BusinessValidationError
from invoicer.services.line_resolver import parse_bool, parse_price, parse_quantity
from invoicer.services.totals import DiscountSpec


class DiscountType(str, Enum):
    """Discount kinds accepted on invoices."""
    AMOUNT = "amount"      # Subtracted from the taxed grand total
    PERCENT = "percent"    # Applied to each subtotal before tax


class LineType(str, Enum):
    VARIATION = "variation"
    CUSTOM = "custom"


# -------------------------------------------------------------------
# Validation helpers
# -------------------------------------------------------------------

def clean_notes(value: Any, max_length: int) -> Optional[str]:
    """
    Strips the notes and enforces the length cap.

    Notes are never truncated: a value over the cap is rejected.

    Raises:
        BusinessValidationError: notes longer than `max_length`
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    if len(value) > max_length:
        raise BusinessValidationError(
            f"Notes must be {max_length} characters or fewer."
        )
    return value or None


def parse_customer_info(value: Any) -> Optional[Dict[str, Any]]:
    """Accepts the customer info as an object or as a JSON encoded object."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except ValueError:
            raise ValueError("customer_info must be a JSON object")
    if not isinstance(value, dict):
        raise ValueError("customer_info must be a JSON object")
    return value


# -------------------------------------------------------------------
# Line requests
# -------------------------------------------------------------------

class VariationItemIn(BaseModel):
    """
    Catalog line of a create/update request.

    Every override is optional: `None` means "use the catalog value"
    (price, name) or "taxable" (taxable flag).
    """

    variation_id: Optional[uuid.UUID] = Field(
        None,
        validation_alias=AliasChoices("variation_id", "variationId"),
    )
    quantity: int = Field(1, ge=1)
    unit_price: Optional[Decimal] = Field(
        None,
        validation_alias=AliasChoices("unit_price", "unitPrice", "price"),
        description="Price override",
    )
    taxable: Optional[bool] = None
    display_name: Optional[str] = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("display_name", "displayName"),
    )

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return parse_quantity(v)

    @field_validator("unit_price", mode="before")
    @classmethod
    def coerce_unit_price(cls, v: Any) -> Optional[Decimal]:
        # A non numeric override means "use the catalog price"
        return parse_price(v)

    @field_validator("taxable", mode="before")
    @classmethod
    def coerce_taxable(cls, v: Any) -> Optional[bool]:
        return parse_bool(v)


class CustomItemIn(BaseModel):
    """Free-form line of a create/update request."""

    product_name: Optional[str] = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("product_name", "productName", "name"),
    )
    size: Optional[str] = Field(None, max_length=100)
    price: Optional[Decimal] = Field(
        None,
        validation_alias=AliasChoices("price", "unit_price", "unitPrice"),
    )
    quantity: int = Field(1, ge=1)
    accessory: Optional[str] = Field(None, max_length=255)
    taxable: Optional[bool] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return parse_quantity(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Optional[Decimal]:
        return parse_price(v)

    @field_validator("taxable", mode="before")
    @classmethod
    def coerce_taxable(cls, v: Any) -> Optional[bool]:
        return parse_bool(v)

    @field_validator("size", "accessory", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)


# -------------------------------------------------------------------
# Document requests
# -------------------------------------------------------------------

class DocumentWrite(BaseModel):
    """
    Fields shared by every estimate/invoice create or update request.

    The total is never accepted from the client.
    """

    customer_id: Optional[uuid.UUID] = Field(
        None,
        validation_alias=AliasChoices("customer_id", "customerId"),
    )
    customer_info: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("customer_info", "customerInfo"),
    )
    notes: Optional[str] = None
    variation_items: List[VariationItemIn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("variationItems", "variation_items"),
    )
    custom_items: List[CustomItemIn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("customItems", "custom_items"),
    )

    @field_validator("customer_id", mode="before")
    @classmethod
    def empty_customer_id(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("customer_info", mode="before")
    @classmethod
    def coerce_customer_info(cls, v: Any) -> Optional[Dict[str, Any]]:
        return parse_customer_info(v)

    @field_validator("variation_items", "custom_items", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def embed_customer_id(self) -> "DocumentWrite":
        # Documents keep the customer id inside their customer snapshot
        if self.customer_id is not None:
            info = dict(self.customer_info or {})
            info.setdefault("id", str(self.customer_id))
            self.customer_info = info
        return self


class EstimateWrite(DocumentWrite):
    """Create or update request of an estimate. Updates replace every line."""

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> Optional[str]:
        return clean_notes(v, settings.estimate_notes_max_length)


class DiscountFields(BaseModel):
    """Optional discount of an invoice (direct or from a conversion)."""

    discount_type: Optional[DiscountType] = Field(
        None,
        validation_alias=AliasChoices("discount_type", "discountType"),
    )
    discount_value: Optional[Decimal] = Field(
        None,
        validation_alias=AliasChoices("discount_value", "discountValue"),
    )

    @field_validator("discount_type", mode="before")
    @classmethod
    def normalize_discount_type(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("discount_value", mode="before")
    @classmethod
    def validate_discount_value(cls, v: Any) -> Optional[Decimal]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        value = parse_price(v)
        if value is None:
            raise ValueError("discount_value must be a number")
        return max(value, Decimal("0"))

    @property
    def discount(self) -> Optional[DiscountSpec]:
        """The discount to apply, or None when no discount type is given."""
        if self.discount_type is None:
            return None
        return DiscountSpec(
            kind=self.discount_type.value,
            value=self.discount_value if self.discount_value is not None else Decimal("0"),
        )


class InvoiceWrite(DiscountFields, DocumentWrite):
    """Create or update request of an invoice. Updates replace every line."""

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> Optional[str]:
        return clean_notes(v, settings.invoice_notes_max_length)


class EstimateNotesUpdate(BaseModel):
    """Notes-only update of an estimate."""

    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> Optional[str]:
        return clean_notes(v, settings.estimate_notes_max_length)


class ConvertRequest(DiscountFields):
    """
    Estimate to invoice conversion request.

    `notes`, when given, replaces the estimate notes on the invoice.
    """

    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> Optional[str]:
        return clean_notes(v, settings.invoice_notes_max_length)


# -------------------------------------------------------------------
# Responses
# -------------------------------------------------------------------

class LineItemRead(BaseModel):
    """Normalized line as returned by the items endpoints."""

    type: LineType
    product_name: str
    size: Optional[str] = None
    price: Decimal
    quantity: int
    accessory: Optional[str] = None
    taxable: bool
    variation_id: Optional[uuid.UUID] = None


class EstimateSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    customer_info: Optional[Dict[str, Any]] = None
    estimate_date: datetime.datetime
    total: Decimal
    notes: Optional[str] = None


class EstimateRead(EstimateSummary):
    """Estimate header with its normalized lines."""

    created_at: datetime.datetime
    updated_at: datetime.datetime
    items: List[LineItemRead] = Field(default_factory=list)


class InvoiceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    customer_info: Optional[Dict[str, Any]] = None
    invoice_date: datetime.datetime
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = None
    total: Decimal
    notes: Optional[str] = None


class InvoiceRead(InvoiceSummary):
    """Invoice header with its normalized lines."""

    created_at: datetime.datetime
    updated_at: datetime.datetime
    items: List[LineItemRead] = Field(default_factory=list)


class EstimateSavedResponse(BaseModel):
    """
    Result of an estimate create/update.

    `warnings` lists the catalog references that could not be resolved
    (those lines were saved with a zero price and the placeholder label).
    """

    estimate_id: uuid.UUID = Field(serialization_alias="estimateId")
    warnings: List[str] = Field(default_factory=list)


class InvoiceSavedResponse(BaseModel):
    """Result of an invoice create/update. See EstimateSavedResponse."""

    invoice_id: uuid.UUID = Field(serialization_alias="invoiceId")
    warnings: List[str] = Field(default_factory=list)


class ConvertResponse(BaseModel):
    invoice_id: uuid.UUID = Field(serialization_alias="invoiceId")
