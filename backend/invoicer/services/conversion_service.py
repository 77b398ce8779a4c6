"""
Estimate to invoice conversion
Project: Invoicer (Estimates & Invoices backend)

Moves an estimate into a new invoice inside one transaction: the
invoice is created with the estimate's customer and notes, every
estimate line is mirrored with its effective values, the total is
computed with the requested discount, and the estimate is deleted.
Either all of it happens or none of it does.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import atomic
from invoicer.models import Invoice
from invoicer.schemas.document import ConvertRequest, ConvertResponse
from invoicer.services.document_store import ESTIMATE, INVOICE, DocumentStore
from invoicer.services.store_service import StoreService
from invoicer.services.totals import compute_totals

logger = logging.getLogger(__name__)


class ConversionService:
    """Service converting estimates into invoices."""

    def __init__(self, store_service: Optional[StoreService] = None) -> None:
        self.estimates = DocumentStore(ESTIMATE)
        self.invoices = DocumentStore(INVOICE)
        self.store_service = store_service or StoreService()

    async def convert(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        estimate_id: uuid.UUID,
        data: ConvertRequest,
    ) -> ConvertResponse:
        """
        Converts an estimate into an invoice.

        Steps (one transaction):
        1. Load and lock the owned estimate
        2. Create the invoice header: customer carried over, notes carried
           over unless the request gives notes, discount from the request
        3. Resolve every stored estimate line (stored values first, catalog
           second) and insert the mirrored invoice line
        4. Compute the total with the discount and the user's tax rate
        5. Delete the estimate lines, then the estimate
        6. Commit

        Args:
            db: Database session
            user_id: Caller
            estimate_id: Estimate to convert
            data: Discount and notes (notes already checked against the cap)

        Returns:
            ConvertResponse: id of the new invoice

        Raises:
            AuthorizationError: foreign or missing estimate (nothing changes)
            PersistenceError: database failure (estimate left untouched)
        """
        async with atomic(db, "convert estimate"):
            # Step 1
            estimate = await self.estimates.get_owned(db, user_id, estimate_id, for_update=True)

            # Step 2
            notes = data.notes if "notes" in data.model_fields_set else estimate.notes
            discount = data.discount
            invoice = Invoice(
                user_id=user_id,
                customer_id=estimate.customer_id,
                customer_info=dict(estimate.customer_info or {}),
                notes=notes,
                discount_type=discount.kind if discount else None,
                discount_value=discount.value if discount else None,
            )
            db.add(invoice)
            await db.flush()

            # Step 3
            lines = await self.estimates.resolve_lines(db, estimate)
            await self.invoices.add_lines(db, invoice, lines)

            # Step 4
            rate = await self.store_service.get_tax_rate(db, user_id)
            totals = compute_totals(lines, rate, discount)
            self.invoices.apply_totals(invoice, totals)

            # Step 5
            await self.estimates.delete(db, estimate)

        logger.info(
            "Estimate %s converted to invoice %s (%s lines, total %s)",
            estimate_id, invoice.id, len(lines), invoice.total,
        )
        return ConvertResponse(invoice_id=invoice.id)
