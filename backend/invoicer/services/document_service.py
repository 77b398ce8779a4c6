"""
Shared service logic for estimates and invoices
Project: Invoicer (Estimates & Invoices backend)

Resolution of the requested lines against the catalog, totals
computation and the read/delete operations common to both document
kinds. EstimateService and InvoiceService add the header fields that
differ (dates, discount, notes cap).
"""

import logging
import uuid
from typing import Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.config import settings
from invoicer.core.database import atomic
from invoicer.schemas.document import DocumentWrite, LineItemRead
from invoicer.services.catalog_service import CatalogService
from invoicer.services.document_store import DocumentKind, DocumentStore
from invoicer.services.line_resolver import (
    ResolvedLine,
    resolve_custom_line,
    resolve_variation_line,
)
from invoicer.services.store_service import StoreService
from invoicer.services.totals import DiscountSpec, DocumentTotals, compute_totals

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Base service for one document kind.

    Subclasses set `kind` and implement `_apply_header` and, for
    invoices, `_discount`.
    """

    kind: DocumentKind

    def __init__(
        self,
        catalog: Optional[CatalogService] = None,
        store_service: Optional[StoreService] = None,
    ) -> None:
        self.store = DocumentStore(self.kind)
        self.catalog = catalog or CatalogService()
        self.store_service = store_service or StoreService()

    # ------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------

    def _apply_header(self, document: Any, data: DocumentWrite, fields: set) -> None:
        """Copies the request header fields listed in `fields` on the document."""
        raise NotImplementedError

    def _discount(self, document: Any) -> Optional[DiscountSpec]:
        return None

    # ------------------------------------------------------------
    # Resolution and totals
    # ------------------------------------------------------------

    async def resolve_request(
        self,
        db: AsyncSession,
        data: DocumentWrite,
    ) -> Tuple[List[ResolvedLine], List[str]]:
        """
        Resolves the lines of a create/update request.

        Catalog lines come first, in request order, then custom lines.
        Catalog lines without a variation id are skipped. One catalog
        lookup is made per catalog line.

        Returns:
            (resolved lines, warnings): a warning is produced for each
            catalog reference that could not be found and for each skipped
            catalog line without a variation id
        """
        placeholder = settings.unresolved_item_label
        lines: List[ResolvedLine] = []
        warnings: List[str] = []

        for position, item in enumerate(data.variation_items, start=1):
            if item.variation_id is None:
                logger.warning(
                    "Catalog line %s of %s request has no variation id, skipped",
                    position, self.kind.name,
                )
                warnings.append(f"Catalog line {position} has no variation id; line skipped")
                continue
            entry = await self.catalog.get_entry(db, item.variation_id)
            resolved = resolve_variation_line(
                variation_id=item.variation_id,
                catalog=entry,
                quantity=item.quantity,
                unit_price=item.unit_price,
                taxable=item.taxable,
                display_name=item.display_name,
                placeholder=placeholder,
            )
            if resolved.catalog_missing:
                logger.warning(
                    "Catalog variation %s not found, %s line saved as %r at %s",
                    item.variation_id, self.kind.name, resolved.label, resolved.unit_price,
                )
                warnings.append(
                    f"Catalog item {item.variation_id} not found; "
                    f"line saved as '{resolved.label}' at price {resolved.unit_price}"
                )
            lines.append(resolved)

        for item in data.custom_items:
            lines.append(
                resolve_custom_line(
                    product_name=item.product_name,
                    price=item.price,
                    quantity=item.quantity,
                    size=item.size,
                    accessory=item.accessory,
                    taxable=item.taxable,
                    placeholder=placeholder,
                )
            )

        return lines, warnings

    async def apply_totals(
        self,
        db: AsyncSession,
        document: Any,
        lines: List[ResolvedLine],
    ) -> DocumentTotals:
        """Computes the totals with the owner's tax rate and writes the total."""
        rate = await self.store_service.get_tax_rate(db, document.user_id)
        totals = compute_totals(lines, rate, self._discount(document))
        self.store.apply_totals(document, totals)
        return totals

    # ------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------

    async def _create(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: DocumentWrite,
    ) -> Tuple[Any, List[str]]:
        async with atomic(db, f"create {self.kind.name}"):
            lines, warnings = await self.resolve_request(db, data)

            document = self.kind.header(user_id=user_id)
            self._apply_header(document, data, set(type(data).model_fields))
            db.add(document)
            await db.flush()

            await self.store.add_lines(db, document, lines)
            await self.apply_totals(db, document, lines)

        logger.info(
            "Created %s %s with %s lines, total %s",
            self.kind.name, document.id, len(lines), document.total,
        )
        return document, warnings

    async def _update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        doc_id: uuid.UUID,
        data: DocumentWrite,
    ) -> Tuple[Any, List[str]]:
        async with atomic(db, f"update {self.kind.name}"):
            document = await self.store.get_owned(db, user_id, doc_id, for_update=True)
            lines, warnings = await self.resolve_request(db, data)

            # Header fields absent from the request keep their value
            self._apply_header(document, data, data.model_fields_set)
            await self.store.replace_lines(db, document, lines)
            await self.apply_totals(db, document, lines)

        logger.info(
            "Updated %s %s with %s lines, total %s",
            self.kind.name, document.id, len(lines), document.total,
        )
        return document, warnings

    # ------------------------------------------------------------
    # Reads and delete
    # ------------------------------------------------------------

    async def get_items(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        doc_id: uuid.UUID,
    ) -> List[LineItemRead]:
        """
        Returns the normalized lines of an owned document.

        Raises:
            AuthorizationError: foreign or missing document
        """
        document = await self.store.get_owned(db, user_id, doc_id)
        return await self.store.read_items(db, document)

    async def delete(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        doc_id: uuid.UUID,
    ) -> None:
        """
        Deletes an owned document and its lines.

        Raises:
            AuthorizationError: foreign or missing document
        """
        async with atomic(db, f"delete {self.kind.name}"):
            document = await self.store.get_owned(db, user_id, doc_id, for_update=True)
            await self.store.delete(db, document)
        logger.info("Deleted %s %s", self.kind.name, doc_id)
