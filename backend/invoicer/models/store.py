"""
SQLAlchemy model for the store settings
Project: Invoicer (Estimates & Invoices backend)
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from invoicer.models import Base
from invoicer.models.mixins import TimestampMixin, UUIDMixin


class StoreSettings(Base, UUIDMixin, TimestampMixin):
    """
    Store identity and tax rate of one user.

    Attributes:
        user_id: Owner (one row per user)
        name, address, phone, email: Printed on documents
        tax_rate: Sales tax as a fraction in [0, 1]; NULL or out of range
            values fall back to the configured default
    """

    __tablename__ = "store_settings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        unique=True,
        doc="Owner of the settings",
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    tax_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 4),
        nullable=True,
        doc="Sales tax rate as a fraction",
    )

    def __repr__(self) -> str:
        return f"<StoreSettings(user_id={self.user_id}, tax_rate={self.tax_rate})>"
