"""
Document store
Project: Invoicer (Estimates & Invoices backend)

Persistence of estimate and invoice headers and their lines. Both
document kinds share one implementation, parameterized by a
DocumentKind that names the header model, the line model and the
foreign key column of the lines.

The store never commits: callers wrap each write sequence in
`atomic(db)` so a document is always written whole or not at all.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Iterable, List, Type

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.config import settings
from invoicer.core.exceptions import AuthorizationError
from invoicer.models import Estimate, EstimateLine, Invoice, InvoiceLine
from invoicer.schemas.document import LineItemRead
from invoicer.services.line_resolver import (
    CatalogEntry,
    ResolvedLine,
    resolve_stored_line,
)
from invoicer.services.totals import DocumentTotals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentKind:
    """Models and columns of one document kind."""

    name: str
    header: Type[Any]
    line: Type[Any]
    fk: str
    date_field: str

    def fk_column(self):
        return getattr(self.line, self.fk)

    def date_column(self):
        return getattr(self.header, self.date_field)


ESTIMATE = DocumentKind(
    name="estimate",
    header=Estimate,
    line=EstimateLine,
    fk="estimate_id",
    date_field="estimate_date",
)
INVOICE = DocumentKind(
    name="invoice",
    header=Invoice,
    line=InvoiceLine,
    fk="invoice_id",
    date_field="invoice_date",
)


class DocumentStore:
    """
    Header and line persistence for one document kind.

    Usage:
        store = DocumentStore(ESTIMATE)
        async with atomic(db, "update estimate"):
            estimate = await store.get_owned(db, user_id, estimate_id, for_update=True)
            await store.replace_lines(db, estimate, resolved)
            store.apply_totals(estimate, totals)
    """

    def __init__(self, kind: DocumentKind) -> None:
        self.kind = kind

    # ------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------

    async def get_owned(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        doc_id: uuid.UUID,
        for_update: bool = False,
    ) -> Any:
        """
        Loads a document header owned by the user.

        Args:
            db: Database session
            user_id: Caller
            doc_id: Document id
            for_update: Lock the header row until the end of the transaction

        Returns:
            The header model instance

        Raises:
            AuthorizationError: the document belongs to another user or
                does not exist (the two cases are not told apart)
        """
        header = self.kind.header
        stmt = select(header).where(header.id == doc_id, header.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        document = result.scalar_one_or_none()
        if document is None:
            logger.warning(
                "Access denied to %s %s for user %s", self.kind.name, doc_id, user_id,
            )
            raise AuthorizationError()
        return document

    async def list_owned(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        *filters: Any,
    ) -> List[Any]:
        """Returns the user's headers, newest first."""
        header = self.kind.header
        stmt = (
            select(header)
            .where(header.user_id == user_id, *filters)
            .order_by(self.kind.date_column().desc(), header.created_at.desc())
        )
        return list((await db.execute(stmt)).scalars().all())

    def apply_totals(self, document: Any, totals: DocumentTotals) -> None:
        """Writes the rounded total on the header."""
        document.total = totals.rounded_total

    # ------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------

    def _build_line(self, document: Any, number: int, resolved: ResolvedLine) -> Any:
        # Effective values are stored so later reads do not depend on the catalog
        return self.kind.line(
            **{self.kind.fk: document.id},
            line_type=resolved.line_type,
            line_number=number,
            variation_id=resolved.variation_id,
            quantity=resolved.quantity,
            unit_price=resolved.unit_price,
            taxable=resolved.taxable,
            display_name=resolved.display_name,
            product_name=resolved.name,
            size=resolved.size,
            accessory=resolved.accessory,
        )

    async def add_lines(
        self,
        db: AsyncSession,
        document: Any,
        lines: Iterable[ResolvedLine],
    ) -> List[Any]:
        """
        Inserts one row per resolved line, numbered in order.

        Repeated catalog references produce repeated rows.
        The header must already have an id (flush it first).
        """
        rows = [
            self._build_line(document, number, resolved)
            for number, resolved in enumerate(lines, start=1)
        ]
        db.add_all(rows)
        await db.flush()
        return rows

    async def delete_lines(self, db: AsyncSession, document: Any) -> None:
        await db.execute(
            delete(self.kind.line)
            .where(self.kind.fk_column() == document.id)
            .execution_options(synchronize_session=False)
        )

    async def replace_lines(
        self,
        db: AsyncSession,
        document: Any,
        lines: Iterable[ResolvedLine],
    ) -> List[Any]:
        """Deletes every line of the document, then inserts the new ones."""
        await self.delete_lines(db, document)
        return await self.add_lines(db, document, lines)

    async def load_lines(self, db: AsyncSession, document: Any) -> List[Any]:
        """Returns the stored line rows, ordered by line number."""
        line = self.kind.line
        stmt = (
            select(line)
            .where(self.kind.fk_column() == document.id)
            .order_by(line.line_number, line.id)
            .execution_options(populate_existing=True)
        )
        return list((await db.execute(stmt)).scalars().all())

    async def resolve_lines(self, db: AsyncSession, document: Any) -> List[ResolvedLine]:
        """
        Resolves the stored lines of a document.

        Stored values win; NULL columns fall back to the catalog entry
        the line still references, if it exists.
        """
        resolved = []
        for row in await self.load_lines(db, document):
            catalog = CatalogEntry.from_variation(row.variation) if row.variation is not None else None
            resolved.append(
                resolve_stored_line(row, catalog, placeholder=settings.unresolved_item_label)
            )
        return resolved

    async def read_items(self, db: AsyncSession, document: Any) -> List[LineItemRead]:
        """Returns the normalized lines of a document, in order."""
        return [to_item(line) for line in await self.resolve_lines(db, document)]

    async def delete(self, db: AsyncSession, document: Any) -> None:
        """Deletes the lines, then the header."""
        await self.delete_lines(db, document)
        await db.delete(document)
        await db.flush()


def to_item(line: ResolvedLine) -> LineItemRead:
    """Serializes a resolved line in the items response shape."""
    return LineItemRead(
        type=line.line_type,
        product_name=line.label,
        size=line.size,
        price=line.unit_price,
        quantity=line.quantity,
        accessory=line.accessory,
        taxable=line.taxable,
        variation_id=line.variation_id,
    )
