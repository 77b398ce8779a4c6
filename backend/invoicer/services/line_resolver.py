"""
Line resolution
Project: Invoicer (Estimates & Invoices backend)

Turns one requested (or stored) document line into a normalized line:
quantity >= 1, effective unit price >= 0 rounded to the cent, effective
taxable flag and effective label. Catalog lines merge the caller's overrides with the
canonical catalog entry; custom lines never look at the catalog.

Pure module: no database access, no logging. Loose client input is
parsed once, at the schema boundary, with the `parse_*` helpers below;
the resolver itself only sees `None` ("not provided") or a typed value.
"""

import re
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from invoicer.services.totals import quantize_money

LINE_TYPE_VARIATION = "variation"
LINE_TYPE_CUSTOM = "custom"

PLACEHOLDER_LABEL = "Item"

ZERO = Decimal("0")

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ------------------------------------------------------------
# Data types
# ------------------------------------------------------------
@dataclass(frozen=True)
class CatalogEntry:
    """Canonical catalog data of one variation."""

    variation_id: uuid.UUID
    product_name: Optional[str]
    price: Decimal
    size: Optional[str] = None
    accessory: Optional[str] = None

    @classmethod
    def from_variation(cls, variation: Any) -> "CatalogEntry":
        product = getattr(variation, "product", None)
        return cls(
            variation_id=variation.id,
            product_name=product.name if product is not None else None,
            price=Decimal(variation.price),
            size=variation.size,
            accessory=variation.accessory,
        )


@dataclass(frozen=True)
class ResolvedLine:
    """
    A normalized document line.

    Attributes:
        line_type: "variation" or "custom"
        variation_id: Catalog reference (catalog lines only)
        quantity: Quantity, at least 1
        unit_price: Effective unit price, never negative
        taxable: Effective taxable flag
        label: Effective label shown on the document
        size: Size (custom value or catalog snapshot)
        accessory: Accessory (custom lines only)
        display_name: Label override given by the caller, if any
        name: Catalog or custom product name, if any
        catalog_missing: The catalog entry could not be found
    """

    line_type: str
    quantity: int
    unit_price: Decimal
    taxable: bool
    label: str
    variation_id: Optional[uuid.UUID] = None
    size: Optional[str] = None
    accessory: Optional[str] = None
    display_name: Optional[str] = None
    name: Optional[str] = None
    catalog_missing: bool = False

    @property
    def amount(self) -> Decimal:
        """Line contribution: unit price times quantity."""
        return self.unit_price * self.quantity


# ------------------------------------------------------------
# Input parsing (used by the request schemas)
# ------------------------------------------------------------
def parse_quantity(value: Any) -> int:
    """
    Parses a quantity, flooring anything invalid or non-positive to 1.

    Strings are read up to the first non-digit ("3 boxes" -> 3),
    fractional numbers are truncated.
    """
    if value is None or isinstance(value, bool):
        return 1
    if isinstance(value, int):
        qty = value
    elif isinstance(value, (float, Decimal)):
        try:
            qty = int(value)
        except (ValueError, OverflowError, InvalidOperation):
            return 1
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 1
        qty = int(match.group(1))
    else:
        return 1
    return qty if qty >= 1 else 1


def parse_price(value: Any) -> Optional[Decimal]:
    """
    Parses a price. Returns None when the value is absent or not numeric.

    The sign is kept; clamping to zero happens during resolution.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite():
        return None
    return price


def parse_bool(value: Any) -> Optional[bool]:
    """
    Parses a taxable-style flag.

    Accepts booleans, 0/1 and the usual true/false, yes/no, on/off
    strings. Anything else is treated as "not provided" (None).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def _clamp_price(price: Optional[Decimal]) -> Optional[Decimal]:
    # Unit prices are stored to the cent; totals must see the same value
    if price is None:
        return None
    return quantize_money(price) if price > ZERO else ZERO


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ------------------------------------------------------------
# Resolution
# ------------------------------------------------------------
def resolve_variation_line(
    variation_id: uuid.UUID,
    catalog: Optional[CatalogEntry],
    quantity: Any = 1,
    unit_price: Optional[Decimal] = None,
    taxable: Optional[bool] = None,
    display_name: Optional[str] = None,
    name: Optional[str] = None,
    size: Optional[str] = None,
    placeholder: str = PLACEHOLDER_LABEL,
) -> ResolvedLine:
    """
    Resolves a catalog line against its catalog entry.

    Args:
        variation_id: Referenced variation
        catalog: Catalog entry, or None when it could not be found
        quantity: Requested quantity
        unit_price: Price override
        taxable: Taxable override
        display_name: Label override
        name: Product name captured when the line was saved
        size: Size captured when the line was saved
        placeholder: Label used when nothing else is available

    Returns:
        ResolvedLine: the normalized line; `catalog_missing` is set when
        the catalog entry was not found
    """
    override_price = _clamp_price(unit_price)
    display_name = _text(display_name)

    if override_price is not None:
        price = override_price
    elif catalog is not None:
        price = _clamp_price(catalog.price)
    else:
        price = ZERO

    name = _text(name)
    if name is None and catalog is not None:
        name = _text(catalog.product_name)
    if size is None and catalog is not None:
        size = catalog.size

    return ResolvedLine(
        line_type=LINE_TYPE_VARIATION,
        variation_id=variation_id,
        quantity=parse_quantity(quantity),
        unit_price=price,
        taxable=True if taxable is None else taxable,
        label=display_name or name or placeholder,
        size=size,
        accessory=None,
        display_name=display_name,
        name=name,
        catalog_missing=catalog is None,
    )


def resolve_custom_line(
    product_name: Optional[str] = None,
    price: Optional[Decimal] = None,
    quantity: Any = 1,
    size: Optional[str] = None,
    accessory: Optional[str] = None,
    taxable: Optional[bool] = None,
    placeholder: str = PLACEHOLDER_LABEL,
) -> ResolvedLine:
    """
    Resolves a free-form line. A missing or invalid price counts as 0.
    """
    name = _text(product_name)
    return ResolvedLine(
        line_type=LINE_TYPE_CUSTOM,
        variation_id=None,
        quantity=parse_quantity(quantity),
        unit_price=_clamp_price(price) if price is not None else ZERO,
        taxable=True if taxable is None else taxable,
        label=name or placeholder,
        size=size,
        accessory=accessory,
        name=name,
    )


def resolve_stored_line(
    line: Any,
    catalog: Optional[CatalogEntry],
    placeholder: str = PLACEHOLDER_LABEL,
) -> ResolvedLine:
    """
    Resolves a persisted estimate or invoice line.

    Stored columns win; NULL columns fall back to the catalog exactly as
    for a new request. Works for both EstimateLine and InvoiceLine.
    """
    if line.line_type == LINE_TYPE_CUSTOM:
        return resolve_custom_line(
            product_name=line.product_name,
            price=line.unit_price,
            quantity=line.quantity,
            size=line.size,
            accessory=line.accessory,
            taxable=line.taxable,
            placeholder=placeholder,
        )

    return resolve_variation_line(
        variation_id=line.variation_id,
        catalog=catalog,
        quantity=line.quantity,
        unit_price=line.unit_price,
        taxable=line.taxable,
        display_name=line.display_name,
        name=line.product_name,
        size=line.size,
        placeholder=placeholder,
    )
