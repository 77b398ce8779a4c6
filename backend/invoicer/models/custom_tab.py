"""
SQLAlchemy model for the CustomTab entity
Project: Invoicer (Estimates & Invoices backend)
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List

from sqlalchemy import JSON, Boolean, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from invoicer.models import Base
from invoicer.models.mixins import TimestampMixin, UUIDMixin


class CustomTab(Base, UUIDMixin, TimestampMixin):
    """
    User-defined catalog tab.

    A tab groups templates for custom lines (size, price, accessory)
    that are not part of the shared catalog. `taxable` is the default
    taxable flag of the lines built from the tab.
    """

    __tablename__ = "custom_tabs"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    variations: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Line templates, in display order",
    )
    taxable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_custom_tabs_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CustomTab(id={self.id}, name={self.name!r}, variations={len(self.variations or [])})>"
