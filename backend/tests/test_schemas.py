"""
Request schema tests.

Loose client input is coerced once at the schema boundary: quantities,
prices, taxable flags, customer info, notes caps and discounts.
"""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from invoicer.schemas.customer import CustomerUpsert
from invoicer.schemas.document import (
    ConvertRequest,
    CustomItemIn,
    EstimateNotesUpdate,
    EstimateWrite,
    InvoiceWrite,
    VariationItemIn,
    clean_notes,
)
from invoicer.schemas.store import StoreSettingsUpdate
from invoicer.core.exceptions import BusinessValidationError


# ============================================================
# Lines
# ============================================================


class TestLineItems:
    """Catalog and custom line coercion."""

    def test_camel_case_aliases(self):
        variation_id = uuid.uuid4()
        item = VariationItemIn.model_validate(
            {"variationId": str(variation_id), "quantity": "2", "unitPrice": "9,50", "displayName": "Front"}
        )

        assert item.variation_id == variation_id
        assert item.quantity == 2
        assert item.unit_price == Decimal("9.50")
        assert item.display_name == "Front"

    def test_bad_values_become_defaults(self):
        """Test that garbage quantity, price and taxable never reject the line."""
        item = VariationItemIn.model_validate(
            {"variation_id": str(uuid.uuid4()), "quantity": "none", "price": "n/a", "taxable": "maybe"}
        )

        assert item.quantity == 1
        assert item.unit_price is None
        assert item.taxable is None

    def test_taxable_strings(self):
        assert VariationItemIn(taxable="false").taxable is False
        assert CustomItemIn(taxable="1").taxable is True

    def test_custom_item_name_alias(self):
        item = CustomItemIn.model_validate({"name": "Decal", "price": "3", "size": 12})
        assert item.product_name == "Decal"
        assert item.price == Decimal("3")
        assert item.size == "12"

    def test_null_line_lists(self):
        data = EstimateWrite.model_validate({"variationItems": None, "customItems": None})
        assert data.variation_items == []
        assert data.custom_items == []


# ============================================================
# Customer info
# ============================================================


class TestCustomerInfo:
    """Customer snapshot parsing."""

    def test_json_string(self):
        data = EstimateWrite.model_validate({"customer_info": '{"name": "Acme", "phone": "555"}'})
        assert data.customer_info == {"name": "Acme", "phone": "555"}

    def test_invalid_json_rejected(self):
        with pytest.raises(ValidationError):
            EstimateWrite.model_validate({"customer_info": "{not json"})

    def test_non_object_rejected(self):
        with pytest.raises(ValidationError):
            EstimateWrite.model_validate({"customer_info": "[1, 2]"})

    def test_customer_id_embedded(self):
        """Test that the customer id is copied into the snapshot."""
        customer_id = uuid.uuid4()
        data = EstimateWrite.model_validate(
            {"customerId": str(customer_id), "customerInfo": {"name": "Acme"}}
        )
        assert data.customer_info == {"name": "Acme", "id": str(customer_id)}

    def test_empty_customer_id(self):
        data = EstimateWrite.model_validate({"customer_id": ""})
        assert data.customer_id is None


# ============================================================
# Notes
# ============================================================


class TestNotes:
    """Notes caps: 150 on estimates, 2000 on invoices."""

    def test_estimate_notes_at_cap(self):
        data = EstimateWrite(notes="x" * 150)
        assert len(data.notes) == 150

    def test_estimate_notes_over_cap(self):
        with pytest.raises(ValidationError) as exc_info:
            EstimateWrite(notes="x" * 151)
        assert "150 characters or fewer" in str(exc_info.value)

    def test_notes_stripped_before_check(self):
        data = EstimateNotesUpdate(notes="  " + "x" * 150 + "  ")
        assert data.notes == "x" * 150

    def test_blank_notes_cleared(self):
        assert EstimateNotesUpdate(notes="   ").notes is None

    def test_invoice_notes_cap(self):
        assert InvoiceWrite(notes="x" * 2000).notes == "x" * 2000
        with pytest.raises(ValidationError):
            InvoiceWrite(notes="x" * 2001)

    def test_convert_notes_never_truncated(self):
        with pytest.raises(ValidationError):
            ConvertRequest(notes="x" * 2001)

    def test_clean_notes_raises_business_error(self):
        with pytest.raises(BusinessValidationError):
            clean_notes("abc", 2)


# ============================================================
# Discounts
# ============================================================


class TestDiscount:
    """Invoice and conversion discounts."""

    def test_no_discount(self):
        assert InvoiceWrite().discount is None
        assert ConvertRequest().discount is None

    def test_type_normalized(self):
        data = InvoiceWrite.model_validate({"discountType": " Percent ", "discountValue": "15"})
        assert data.discount.kind == "percent"
        assert data.discount.value == Decimal("15")

    def test_missing_value_is_zero(self):
        data = ConvertRequest(discount_type="amount")
        assert data.discount.value == Decimal("0")

    def test_negative_value_clamped(self):
        data = ConvertRequest(discount_type="amount", discount_value="-5")
        assert data.discount_value == Decimal("0")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            InvoiceWrite(discount_type="coupon")

    def test_non_numeric_value_rejected(self):
        with pytest.raises(ValidationError):
            ConvertRequest(discount_type="amount", discount_value="ten")


# ============================================================
# Other requests
# ============================================================


class TestOtherRequests:
    """Customer and store settings requests."""

    def test_customer_requires_name_or_company(self):
        with pytest.raises(ValidationError):
            CustomerUpsert(email="a@b.c")
        assert CustomerUpsert(company=" Acme ").company == "Acme"

    def test_tax_rate_comma_decimal(self):
        assert StoreSettingsUpdate(tax_rate="0,0825").tax_rate == Decimal("0.0825")

    def test_tax_rate_out_of_range(self):
        with pytest.raises(ValidationError):
            StoreSettingsUpdate(tax_rate="6")
