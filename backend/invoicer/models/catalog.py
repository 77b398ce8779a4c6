"""
SQLAlchemy models for the product catalog
Project: Invoicer (Estimates & Invoices backend)

Contains:
- Product: shared catalog product
- ProductVariation: priced entry of a product (size, accessory, price)
- ArchivedProduct: per-user hiding of a whole product
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicer.models import Base
from invoicer.models.mixins import ArchivableMixin, TimestampMixin, UUIDMixin


class Product(Base, UUIDMixin, TimestampMixin):
    """
    Catalog product shared by every user.

    Prices live on the variations; `base_price` is informational.

    Attributes:
        id: UUID primary key
        name: Product name, used as the default label of catalog lines
        description: Free text description
        base_price: Reference price
        example_image: Path or URL of a sample picture

    Relationships:
        variations: All variations of the product (every user)
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Product name",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Product description",
    )

    base_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        doc="Reference price",
    )

    example_image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        doc="Sample picture",
    )

    variations: Mapped[List["ProductVariation"]] = relationship(
        "ProductVariation",
        back_populates="product",
        lazy="noload",
        doc="Variations of the product",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name!r})>"


class ProductVariation(Base, UUIDMixin, TimestampMixin, ArchivableMixin):
    """
    Priced catalog entry.

    Variations with `user_id IS NULL` form the default catalog that is
    copied to every new user; the others belong to one user.

    Attributes:
        id: UUID primary key
        product_id: Parent product
        user_id: Owner (NULL for the default catalog)
        size: Size label
        accessory: Accessory label
        quantity: Pack quantity label (e.g. "10 pack")
        price: Canonical unit price
        archived: Hidden from the catalog listing

    Relationships:
        product: Parent product
    """

    __tablename__ = "product_variations"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        doc="Parent product",
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        doc="Owner; NULL for the default catalog",
    )

    size: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    accessory: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    quantity: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Canonical unit price",
    )

    product: Mapped["Product"] = relationship(
        "Product",
        back_populates="variations",
        lazy="selectin",
        doc="Parent product",
    )

    __table_args__ = (
        Index("ix_product_variations_user_product", "user_id", "product_id"),
        CheckConstraint("price >= 0", name="ck_product_variations_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<ProductVariation(id={self.id}, product_id={self.product_id}, price={self.price})>"


class ArchivedProduct(Base, UUIDMixin, TimestampMixin, ArchivableMixin):
    """
    Marks a product as hidden for one user.

    Attributes:
        user_id: User hiding the product
        product_id: Hidden product
        archived: Whether the product is currently hidden
        archived_at: When it was last archived
    """

    __tablename__ = "archived_products"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    archived_at: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_archived_products_user_product"),
    )
