"""
SQLAlchemy model mixins
Project: Invoicer (Estimates & Invoices backend)

Reusable mixins adding common columns to the models.
"""

import datetime
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Uuid
from sqlalchemy import event
from sqlalchemy.orm import Mapped, mapped_column, Session
from sqlalchemy.sql import func


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ArchivableMixin:
    """
    Mixin for soft deletion of catalog rows.

    Archived rows stay in place so existing document lines keep their
    reference, but they are hidden from the catalog listing.

    Usage:
        class MyModel(Base, ArchivableMixin):
            __tablename__ = "my_table"
            ...
    """

    archived: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Soft delete flag: True = hidden from the catalog",
    )


class TimestampMixin:
    """
    Mixin maintaining creation and last update timestamps.

    Adds:
    - created_at: set by the database on insert
    - updated_at: refreshed on every flush that modifies the row

    Usage:
        class MyModel(Base, TimestampMixin):
            __tablename__ = "my_table"
            ...
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        doc="Row creation time",
    )

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        doc="Last update time",
    )


class UUIDMixin:
    """
    Mixin for a UUID primary key generated application-side.

    Usage:
        class MyModel(Base, UUIDMixin):
            __tablename__ = "my_table"
            ...
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )


class LineItemMixin:
    """
    Columns shared by estimate and invoice lines.

    A line is either a catalog line (`line_type == "variation"`, with a
    variation reference and optional overrides) or a custom line
    (`line_type == "custom"`, carrying its own name, size and accessory).

    Override columns are nullable: NULL means "use the catalog value"
    (price, product name) or `True` for the taxable flag.

    The foreign keys (document and variation) are declared on the
    concrete classes.
    """

    line_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Line kind: variation (catalog) or custom",
    )

    line_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Position of the line inside the document",
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Quantity (>= 1)",
    )

    unit_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        doc="Unit price; for catalog lines an override of the catalog price",
    )

    taxable: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        nullable=True,
        doc="Taxable flag; NULL means taxable",
    )

    display_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Label override for catalog lines",
    )

    product_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Name of a custom line",
    )

    size: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="Size (custom lines, snapshot of the catalog size otherwise)",
    )

    accessory: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Accessory of a custom line",
    )


# ------------------------------------------------------------
# Event listeners
# ------------------------------------------------------------
@event.listens_for(Session, "before_flush")
def update_timestamp(session: Session, flush_context, instances) -> None:
    """
    Refreshes `updated_at` on new and modified rows before each flush.

    Args:
        session: SQLAlchemy session
        flush_context: Flush context
        instances: Unused
    """
    now = _utcnow()

    for obj in session.dirty:
        if hasattr(obj, "updated_at"):
            if session.is_modified(obj, include_collections=False):
                obj.updated_at = now

    for obj in session.new:
        if hasattr(obj, "updated_at"):
            obj.updated_at = now
