"""
Totals calculation
Project: Invoicer (Estimates & Invoices backend)

Folds normalized lines into document totals, applying the store tax
rate and an optional discount.

Order of operations:
- no discount:  taxable * (1 + r) + nontaxable
- amount:       tax first, then the discount on the grand total
- percent:      discount on each subtotal first, then tax

Tax is applied at a different point on each discount path.

Pure module: no database access.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

DISCOUNT_AMOUNT = "amount"
DISCOUNT_PERCENT = "percent"
DISCOUNT_TYPES = (DISCOUNT_AMOUNT, DISCOUNT_PERCENT)

DEFAULT_TAX_RATE = Decimal("0.06")

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class DiscountSpec:
    """Discount requested for an invoice: kind ("amount" or "percent") and value."""

    kind: str
    value: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    """
    Result of a totals calculation. Amounts are unrounded.

    Attributes:
        taxable_subtotal: Sum of taxable lines, before tax and discount
        nontaxable_subtotal: Sum of non-taxable lines, before discount
        pre_discount_total: taxable * (1 + r) + nontaxable
        discount_amount: pre_discount_total - total
        total: Final total, never negative
    """

    taxable_subtotal: Decimal
    nontaxable_subtotal: Decimal
    pre_discount_total: Decimal
    discount_amount: Decimal
    total: Decimal

    @property
    def rounded_total(self) -> Decimal:
        return quantize_money(self.total)


def quantize_money(value: Decimal) -> Decimal:
    """Rounds an amount to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sanitize_tax_rate(value: Any, default: Decimal = DEFAULT_TAX_RATE) -> Decimal:
    """
    Returns the tax rate as a Decimal in [0, 1].

    Absent, non-numeric or out of range values yield `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        rate = Decimal(str(value))
    except ArithmeticError:
        return default
    if not rate.is_finite() or rate < ZERO or rate > ONE:
        return default
    return rate


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(value, high))


def compute_totals(
    lines: Iterable[Any],
    tax_rate: Decimal,
    discount: Optional[DiscountSpec] = None,
) -> DocumentTotals:
    """
    Computes the totals of a document.

    Args:
        lines: Normalized lines (anything with `unit_price`, `quantity`
            and `taxable`, e.g. ResolvedLine)
        tax_rate: Tax rate as a fraction; sanitized to [0, 1]
        discount: Optional discount; its value is clamped, never rejected

    Returns:
        DocumentTotals: subtotals, pre-discount total, discount and total

    Examples:
        Rate 0.06, taxable 20 and non-taxable 5:
        - no discount   -> 26.2
        - 50 percent    -> 13.1
        - 10 amount     -> 16.2
    """
    rate = sanitize_tax_rate(tax_rate)

    taxable = ZERO
    nontaxable = ZERO
    for line in lines:
        amount = max(ZERO, Decimal(line.unit_price)) * max(1, int(line.quantity))
        if line.taxable:
            taxable += amount
        else:
            nontaxable += amount

    pre_discount = taxable * (ONE + rate) + nontaxable
    total = pre_discount

    if discount is not None and discount.kind == DISCOUNT_AMOUNT:
        value = _clamp(Decimal(discount.value), ZERO, pre_discount)
        total = max(ZERO, pre_discount - value)
    elif discount is not None and discount.kind == DISCOUNT_PERCENT:
        factor = ONE - _clamp(Decimal(discount.value), ZERO, HUNDRED) / HUNDRED
        total = taxable * factor * (ONE + rate) + nontaxable * factor

    return DocumentTotals(
        taxable_subtotal=taxable,
        nontaxable_subtotal=nontaxable,
        pre_discount_total=pre_discount,
        discount_amount=pre_discount - total,
        total=total,
    )
