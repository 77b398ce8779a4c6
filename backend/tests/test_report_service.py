"""
Sales report tests.
"""

import datetime
from decimal import Decimal

import pytest

from invoicer.core.exceptions import BusinessValidationError
from invoicer.models import Invoice, InvoiceLine
from invoicer.services.report_service import ReportService


def _at(day: int, hour: int = 12) -> datetime.datetime:
    return datetime.datetime(2026, 3, day, hour, tzinfo=datetime.timezone.utc)


@pytest.fixture
async def march_invoices(db, user_id, other_user_id):
    """Invoices on March 1st, 10th (late evening) and 20th, plus a foreign one."""
    rows = [
        Invoice(user_id=user_id, invoice_date=_at(1), total=Decimal("10.00")),
        Invoice(user_id=user_id, invoice_date=_at(10, 23), total=Decimal("20.50")),
        Invoice(user_id=user_id, invoice_date=_at(20), total=Decimal("30.00")),
        Invoice(user_id=other_user_id, invoice_date=_at(10), total=Decimal("99.00")),
    ]
    db.add_all(rows)
    await db.flush()
    db.add(
        InvoiceLine(
            invoice_id=rows[1].id,
            line_type="custom",
            line_number=1,
            quantity=1,
            unit_price=Decimal("20.50"),
            taxable=False,
            product_name="Poster",
        )
    )
    await db.commit()
    return rows


class TestSalesReport:
    """Date range, totals and items."""

    async def test_inclusive_range(self, db, user_id, march_invoices):
        """Test that the end date includes the whole day."""
        report = await ReportService().sales(db, user_id, datetime.date(2026, 3, 1), datetime.date(2026, 3, 10))

        assert report.invoice_count == 2
        assert report.total_sales == Decimal("30.50")
        assert [i.id for i in report.invoices] == [march_invoices[1].id, march_invoices[0].id]
        assert [item.product_name for item in report.invoices[0].items] == ["Poster"]

    async def test_open_range(self, db, user_id, march_invoices):
        report = await ReportService().sales(db, user_id)
        assert report.invoice_count == 3
        assert report.total_sales == Decimal("60.50")

    async def test_empty_range(self, db, user_id, march_invoices):
        report = await ReportService().sales(db, user_id, datetime.date(2026, 4, 1), datetime.date(2026, 4, 30))
        assert report.invoice_count == 0
        assert report.total_sales == Decimal("0.00")

    async def test_reversed_range(self, db, user_id):
        with pytest.raises(BusinessValidationError):
            await ReportService().sales(db, user_id, datetime.date(2026, 3, 10), datetime.date(2026, 3, 1))
