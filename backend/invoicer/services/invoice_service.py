"""
Service layer for invoices
Project: Invoicer (Estimates & Invoices backend)

Defines the business logic of invoices: listing with customer filter
and search, reading with the normalized lines, create and update with
an optional discount, and deletion.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, List, Optional, Set

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.models import Invoice
from invoicer.schemas.document import (
    InvoiceRead,
    InvoiceSavedResponse,
    InvoiceSummary,
    InvoiceWrite,
)
from invoicer.services.document_service import DocumentService
from invoicer.services.document_store import INVOICE
from invoicer.services.totals import DiscountSpec

logger = logging.getLogger(__name__)

# customer_info keys matched by the free text search
SEARCH_FIELDS = ("name", "company", "email", "phone")


class InvoiceService(DocumentService):
    """
    Service for invoice operations.

    The discount is stored on the header as requested and applied by
    the totals calculation at every save.
    """

    kind = INVOICE

    def _apply_header(self, document: Any, data: InvoiceWrite, fields: Set[str]) -> None:
        if "customer_id" in fields:
            document.customer_id = data.customer_id
        if "customer_info" in fields or "customer_id" in fields:
            document.customer_info = data.customer_info or {}
        if "notes" in fields:
            document.notes = data.notes
        if "discount_type" in fields:
            document.discount_type = data.discount_type.value if data.discount_type else None
        if "discount_value" in fields:
            document.discount_value = data.discount_value

    def _discount(self, document: Any) -> Optional[DiscountSpec]:
        if not document.discount_type:
            return None
        return DiscountSpec(
            kind=document.discount_type,
            value=Decimal(document.discount_value or 0),
        )

    async def get_all(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        customer_id: Optional[uuid.UUID] = None,
        q: Optional[str] = None,
    ) -> List[InvoiceSummary]:
        """
        Returns the caller's invoices, newest first.

        Args:
            customer_id: Exact match on the customer, either the column or
                the id embedded in the customer snapshot. Wins over `q`.
            q: Case-insensitive search on the customer name, company,
                email and phone
        """
        filters = []
        if customer_id is not None:
            filters.append(
                or_(
                    Invoice.customer_id == customer_id,
                    Invoice.customer_info["id"].as_string() == str(customer_id),
                )
            )
        elif q and q.strip():
            pattern = f"%{q.strip()}%"
            filters.append(
                or_(*(Invoice.customer_info[key].as_string().ilike(pattern) for key in SEARCH_FIELDS))
            )

        invoices = await self.store.list_owned(db, user_id, *filters)
        return [InvoiceSummary.model_validate(invoice) for invoice in invoices]

    async def get_by_id(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        invoice_id: uuid.UUID,
    ) -> InvoiceRead:
        """
        Returns an invoice with its total and normalized lines.

        Raises:
            AuthorizationError: foreign or missing invoice
        """
        invoice = await self.store.get_owned(db, user_id, invoice_id)
        items = await self.store.read_items(db, invoice)
        return InvoiceRead.model_validate(invoice).model_copy(update={"items": items})

    async def create(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: InvoiceWrite,
    ) -> InvoiceSavedResponse:
        """
        Creates an invoice: header, resolved lines and derived total in
        one transaction.

        Raises:
            PersistenceError: database failure (nothing is written)
        """
        invoice, warnings = await self._create(db, user_id, data)
        return InvoiceSavedResponse(invoice_id=invoice.id, warnings=warnings)

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        invoice_id: uuid.UUID,
        data: InvoiceWrite,
    ) -> InvoiceSavedResponse:
        """
        Updates an invoice, replacing ALL of its lines.

        Raises:
            AuthorizationError: foreign or missing invoice
            PersistenceError: database failure (invoice unchanged)
        """
        invoice, warnings = await self._update(db, user_id, invoice_id, data)
        return InvoiceSavedResponse(invoice_id=invoice.id, warnings=warnings)
