"""
Service layer for the sales report
Project: Invoicer (Estimates & Invoices backend)
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.exceptions import BusinessValidationError
from invoicer.models import Invoice
from invoicer.schemas.document import InvoiceRead
from invoicer.schemas.report import SalesReport
from invoicer.services.document_store import INVOICE, DocumentStore
from invoicer.services.totals import quantize_money

logger = logging.getLogger(__name__)


class ReportService:
    """Service for the sales report."""

    def __init__(self) -> None:
        self.invoices = DocumentStore(INVOICE)

    async def sales(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> SalesReport:
        """
        Returns the caller's invoices dated between the two bounds
        (inclusive), newest first, each with its normalized lines.

        Raises:
            BusinessValidationError: start_date after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise BusinessValidationError("start_date must not be after end_date")

        filters = []
        if start_date is not None:
            filters.append(Invoice.invoice_date >= _day_start(start_date))
        if end_date is not None:
            filters.append(Invoice.invoice_date < _day_start(end_date + datetime.timedelta(days=1)))

        rows = []
        total = Decimal("0")
        for invoice in await self.invoices.list_owned(db, user_id, *filters):
            items = await self.invoices.read_items(db, invoice)
            rows.append(InvoiceRead.model_validate(invoice).model_copy(update={"items": items}))
            total += invoice.total

        logger.info(
            "Sales report for user %s (%s to %s): %s invoices",
            user_id, start_date, end_date, len(rows),
        )
        return SalesReport(
            start_date=start_date,
            end_date=end_date,
            invoice_count=len(rows),
            total_sales=quantize_money(total),
            invoices=rows,
        )


def _day_start(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)
