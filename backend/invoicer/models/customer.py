"""
SQLAlchemy model for the Customer entity
Project: Invoicer (Estimates & Invoices backend)
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from invoicer.models import Base
from invoicer.models.mixins import TimestampMixin, UUIDMixin


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Customer directory entry of one user.

    A customer is identified, for upserts, by its (name, company) pair
    within the owner's directory. Documents keep their own copy of the
    customer data in `customer_info`, with the customer id embedded.
    """

    __tablename__ = "customers"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    company: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_customers_user_name_company", "user_id", "name", "company"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name!r}, company={self.company!r})>"
