"""
Estimate to invoice conversion tests.

The conversion is all or nothing: either the invoice exists with the
mirrored lines and the estimate is gone, or nothing changed.
"""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from invoicer.core.exceptions import AuthorizationError, PersistenceError
from invoicer.models import Estimate, EstimateLine, Invoice, InvoiceLine
from invoicer.schemas.document import ConvertRequest, EstimateWrite
from invoicer.services.catalog_service import CatalogService
from invoicer.services.conversion_service import ConversionService
from invoicer.services.estimate_service import EstimateService
from invoicer.services.invoice_service import InvoiceService


@pytest.fixture
def estimates():
    return EstimateService()


@pytest.fixture
def invoices():
    return InvoiceService()


@pytest.fixture
def service():
    return ConversionService()


@pytest.fixture
async def estimate_id(db, user_id, catalog, estimates):
    """Estimate worth 26.20: two banners and a non-taxable delivery."""
    data = EstimateWrite.model_validate({
        "customerId": str(uuid.uuid4()),
        "customerInfo": {"name": "Acme"},
        "notes": "Front entrance",
        "variationItems": [{"variationId": str(catalog.banner.id), "quantity": 2, "displayName": "Entrance"}],
        "customItems": [{"name": "Delivery", "price": "5", "taxable": False}],
    })
    saved = await estimates.create(db, user_id, data)
    return saved.estimate_id


async def count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# ============================================================
# Successful conversion
# ============================================================


class TestConvert:
    """Conversion results."""

    async def test_invoice_mirrors_estimate(self, service, invoices, estimates, db, user_id, estimate_id):
        before = await estimates.get_by_id(db, user_id, estimate_id)

        result = await service.convert(db, user_id, estimate_id, ConvertRequest())
        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)

        assert invoice.total == Decimal("26.20")
        assert invoice.customer_id == before.customer_id
        assert invoice.customer_info == before.customer_info
        assert invoice.notes == "Front entrance"
        assert [i.model_dump() for i in invoice.items] == [i.model_dump() for i in before.items]
        assert invoice.items[0].product_name == "Entrance"

    async def test_estimate_removed(self, service, estimates, db, user_id, estimate_id):
        await service.convert(db, user_id, estimate_id, ConvertRequest())

        with pytest.raises(AuthorizationError):
            await estimates.get_by_id(db, user_id, estimate_id)
        assert await count(db, Estimate) == 0
        assert await count(db, EstimateLine) == 0
        assert await count(db, InvoiceLine) == 2

    async def test_discount_applied(self, service, invoices, db, user_id, estimate_id):
        data = ConvertRequest(discount_type="percent", discount_value="50")
        result = await service.convert(db, user_id, estimate_id, data)

        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert invoice.total == Decimal("13.10")
        assert invoice.discount_type.value == "percent"

    async def test_notes_override(self, service, invoices, db, user_id, estimate_id):
        result = await service.convert(db, user_id, estimate_id, ConvertRequest(notes="Net 30"))
        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert invoice.notes == "Net 30"

    async def test_explicit_empty_notes(self, service, invoices, db, user_id, estimate_id):
        result = await service.convert(db, user_id, estimate_id, ConvertRequest(notes=""))
        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert invoice.notes is None

    async def test_estimate_without_lines(self, service, estimates, invoices, db, user_id):
        saved = await estimates.create(db, user_id, EstimateWrite())

        result = await service.convert(db, user_id, saved.estimate_id, ConvertRequest())

        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert invoice.items == []
        assert invoice.total == Decimal("0.00")

    async def test_sub_cent_price_total_unchanged(self, service, estimates, invoices, db, user_id):
        """Test that converting keeps the total of an estimate with a sub-cent price."""
        data = EstimateWrite.model_validate({"customItems": [{"name": "Sticker", "price": "0.335", "quantity": 3}]})
        saved = await estimates.create(db, user_id, data)
        estimate = await estimates.get_by_id(db, user_id, saved.estimate_id)

        result = await service.convert(db, user_id, saved.estimate_id, ConvertRequest())

        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert estimate.total == Decimal("1.08")
        assert invoice.total == estimate.total
        assert invoice.items[0].price == Decimal("0.34")

    async def test_saved_prices_used(self, service, invoices, db, user_id, catalog, estimate_id):
        """Test that the invoice keeps the estimate prices after a catalog change."""
        await CatalogService().update_price(db, user_id, catalog.banner.id, Decimal("50"))

        result = await service.convert(db, user_id, estimate_id, ConvertRequest())

        invoice = await invoices.get_by_id(db, user_id, result.invoice_id)
        assert invoice.items[0].price == Decimal("10.00")
        assert invoice.total == Decimal("26.20")


# ============================================================
# Failures
# ============================================================


class TestConvertFailures:
    """Nothing changes when the conversion cannot complete."""

    async def test_foreign_estimate(self, service, estimates, db, user_id, other_user_id, estimate_id):
        with pytest.raises(AuthorizationError):
            await service.convert(db, other_user_id, estimate_id, ConvertRequest())

        assert await count(db, Invoice) == 0
        estimate = await estimates.get_by_id(db, user_id, estimate_id)
        assert len(estimate.items) == 2

    async def test_missing_estimate(self, service, db, user_id):
        with pytest.raises(AuthorizationError):
            await service.convert(db, user_id, uuid.uuid4(), ConvertRequest())

    async def test_failure_rolls_back(self, service, estimates, db, user_id, estimate_id, monkeypatch):
        """Test that a failure on the last step leaves the estimate and no invoice."""
        failing = AsyncMock(side_effect=OperationalError("DELETE", {}, Exception("disk full")))
        monkeypatch.setattr(service.estimates, "delete", failing)

        with pytest.raises(PersistenceError):
            await service.convert(db, user_id, estimate_id, ConvertRequest())

        failing.assert_awaited_once()
        assert await count(db, Invoice) == 0
        assert await count(db, InvoiceLine) == 0
        estimate = await estimates.get_by_id(db, user_id, estimate_id)
        assert estimate.total == Decimal("26.20")
        assert len(estimate.items) == 2
