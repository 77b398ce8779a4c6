"""
SQLAlchemy models for invoices
Project: Invoicer (Estimates & Invoices backend)

Contains:
- Invoice: invoice header (customer, date, discount, derived total, notes)
- InvoiceLine: one catalog or custom line of an invoice
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicer.models import Base
from invoicer.models.mixins import LineItemMixin, TimestampMixin, UUIDMixin, _utcnow


class Invoice(Base, UUIDMixin, TimestampMixin):
    """
    Invoice header.

    Created directly or by converting an estimate. The discount is
    stored as requested (type and value) and the total is derived from
    the lines, the store tax rate and the discount at every save.

    Attributes:
        id: UUID primary key
        user_id: Owner
        customer_id: Optional customer directory reference
        customer_info: Snapshot of the customer data (JSON)
        invoice_date: Date of the invoice
        discount_type: "amount", "percent" or NULL
        discount_value: Discount value as requested
        total: Grand total after tax and discount, rounded to cents
        notes: Free notes (at most 2000 characters)
    """

    __tablename__ = "invoices"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        doc="Owner of the invoice",
    )

    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        doc="Customer directory reference",
    )

    customer_info: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
        doc="Customer data snapshot",
    )

    invoice_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        doc="Invoice date",
    )

    discount_type: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        doc="Discount kind: amount or percent",
    )

    discount_value: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        doc="Discount value",
    )

    total: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Derived grand total",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Invoice notes",
    )

    __table_args__ = (
        Index("ix_invoices_user_date", "user_id", "invoice_date"),
        CheckConstraint(
            "discount_type IS NULL OR discount_type IN ('amount', 'percent')",
            name="ck_invoices_discount_type",
        ),
        CheckConstraint("total >= 0", name="ck_invoices_total_positive"),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, user_id={self.user_id}, total={self.total})>"


class InvoiceLine(Base, UUIDMixin, LineItemMixin):
    """
    Line of an invoice.

    Relationships:
        variation: Referenced catalog variation, if any
    """

    __tablename__ = "invoice_lines"

    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        doc="Parent invoice",
    )

    variation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        doc="Catalog variation (catalog lines only); not enforced, the entry may be gone",
    )

    variation: Mapped[Optional["ProductVariation"]] = relationship(  # noqa: F821
        "ProductVariation",
        primaryjoin="foreign(InvoiceLine.variation_id) == ProductVariation.id",
        viewonly=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_invoice_lines_invoice_line", "invoice_id", "line_number"),
        CheckConstraint("line_type IN ('variation', 'custom')", name="ck_invoice_lines_type"),
        CheckConstraint("quantity >= 1", name="ck_invoice_lines_quantity"),
    )

    def __repr__(self) -> str:
        return f"<InvoiceLine(invoice_id={self.invoice_id}, #{self.line_number}, {self.line_type})>"
