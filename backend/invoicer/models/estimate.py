"""
SQLAlchemy models for estimates
Project: Invoicer (Estimates & Invoices backend)

Contains:
- Estimate: estimate header (customer, date, derived total, notes)
- EstimateLine: one catalog or custom line of an estimate
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
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicer.models import Base
from invoicer.models.mixins import LineItemMixin, TimestampMixin, UUIDMixin, _utcnow


class Estimate(Base, UUIDMixin, TimestampMixin):
    """
    Estimate header.

    The total is always derived from the lines and the store tax rate
    and is rewritten at every save. The lines are not mapped as a
    relationship: they are read explicitly, ordered by `line_number`.

    Attributes:
        id: UUID primary key
        user_id: Owner
        customer_id: Optional customer directory reference
        customer_info: Snapshot of the customer data (JSON)
        estimate_date: Creation date of the estimate
        total: Grand total, rounded to cents
        notes: Free notes (at most 150 characters)
    """

    __tablename__ = "estimates"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        doc="Owner of the estimate",
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

    estimate_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        doc="Estimate date",
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
        doc="Estimate notes",
    )

    __table_args__ = (
        Index("ix_estimates_user_date", "user_id", "estimate_date"),
        CheckConstraint("total >= 0", name="ck_estimates_total_positive"),
    )

    def __repr__(self) -> str:
        return f"<Estimate(id={self.id}, user_id={self.user_id}, total={self.total})>"


class EstimateLine(Base, UUIDMixin, LineItemMixin):
    """
    Line of an estimate.

    Relationships:
        variation: Referenced catalog variation, if any
    """

    __tablename__ = "estimate_lines"

    estimate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("estimates.id", ondelete="CASCADE"),
        nullable=False,
        doc="Parent estimate",
    )

    variation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        doc="Catalog variation (catalog lines only); not enforced, the entry may be gone",
    )

    variation: Mapped[Optional["ProductVariation"]] = relationship(  # noqa: F821
        "ProductVariation",
        primaryjoin="foreign(EstimateLine.variation_id) == ProductVariation.id",
        viewonly=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_estimate_lines_estimate_line", "estimate_id", "line_number"),
        CheckConstraint("line_type IN ('variation', 'custom')", name="ck_estimate_lines_type"),
        CheckConstraint("quantity >= 1", name="ck_estimate_lines_quantity"),
    )

    def __repr__(self) -> str:
        return f"<EstimateLine(estimate_id={self.estimate_id}, #{self.line_number}, {self.line_type})>"
