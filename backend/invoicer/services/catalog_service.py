"""
Service layer for the product catalog
Project: Invoicer (Estimates & Invoices backend)

Catalog lookups used while resolving document lines, plus the catalog
management operations (listing, variations, archiving, seeding).
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import atomic
from invoicer.core.exceptions import BusinessValidationError, NotFoundError
from invoicer.models import ArchivedProduct, Product, ProductVariation
from invoicer.schemas.catalog import (
    ProductRead,
    SeedResult,
    VariationCreate,
    VariationRead,
)
from invoicer.services.line_resolver import CatalogEntry

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for catalog reads and management.

    `get_entry` is the price lookup used by line resolution: it is not
    scoped to the caller and never raises for a missing entry.
    """

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    async def get_entry(
        self,
        db: AsyncSession,
        variation_id: uuid.UUID,
    ) -> Optional[CatalogEntry]:
        """
        Returns the canonical catalog data of a variation.

        Args:
            db: Database session
            variation_id: Variation to look up

        Returns:
            CatalogEntry, or None when the variation does not exist
        """
        variation = await db.get(ProductVariation, variation_id)
        if variation is None:
            logger.debug("Catalog variation %s not found", variation_id)
            return None
        return CatalogEntry.from_variation(variation)

    # ------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------

    async def list_products(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> List[ProductRead]:
        """
        Returns the catalog as seen by one user.

        Products the user archived are hidden; only the user's own,
        non archived variations are listed under each product.
        """
        archived_ids = select(ArchivedProduct.product_id).where(
            ArchivedProduct.user_id == user_id,
            ArchivedProduct.archived.is_(True),
        )
        products = (
            await db.execute(
                select(Product)
                .where(Product.id.not_in(archived_ids))
                .order_by(Product.name, Product.id)
            )
        ).scalars().all()

        variations = (
            await db.execute(
                select(ProductVariation)
                .where(
                    ProductVariation.user_id == user_id,
                    ProductVariation.archived.is_(False),
                )
                .order_by(ProductVariation.created_at, ProductVariation.id)
            )
        ).scalars().all()

        by_product: dict = {}
        for variation in variations:
            by_product.setdefault(variation.product_id, []).append(
                VariationRead.model_validate(variation)
            )

        return [
            ProductRead(
                id=product.id,
                name=product.name,
                description=product.description,
                base_price=product.base_price,
                example_image=product.example_image,
                variations=by_product.get(product.id, []),
            )
            for product in products
        ]

    # ------------------------------------------------------------
    # Variations
    # ------------------------------------------------------------

    async def add_variation(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        data: VariationCreate,
    ) -> ProductVariation:
        """
        Adds a variation owned by the user to a product.

        Raises:
            BusinessValidationError: neither size nor quantity given
            NotFoundError: the product does not exist
        """
        if data.size is None and data.quantity is None:
            raise BusinessValidationError("Quantity or size is required")

        async with atomic(db, "add variation"):
            product = await db.get(Product, product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")

            variation = ProductVariation(
                product_id=product_id,
                user_id=user_id,
                size=data.size,
                accessory=data.accessory or "None",
                quantity=data.quantity,
                price=data.price,
            )
            db.add(variation)

        logger.info("Variation %s added to product %s", variation.id, product_id)
        return variation

    async def _get_active_variation(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        variation_id: uuid.UUID,
    ) -> ProductVariation:
        result = await db.execute(
            select(ProductVariation)
            .where(
                ProductVariation.id == variation_id,
                ProductVariation.user_id == user_id,
                ProductVariation.archived.is_(False),
            )
            .with_for_update()
        )
        variation = result.scalar_one_or_none()
        if variation is None:
            raise NotFoundError("Variation not found, not owned by you, or archived")
        return variation

    async def update_price(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        variation_id: uuid.UUID,
        price,
    ) -> ProductVariation:
        """
        Changes the price of one of the user's active variations.

        Existing documents keep the price stored on their lines.

        Raises:
            NotFoundError: not found, not owned or archived
        """
        async with atomic(db, "update variation price"):
            variation = await self._get_active_variation(db, user_id, variation_id)
            variation.price = price
        return variation

    async def archive_variation(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        variation_id: uuid.UUID,
    ) -> ProductVariation:
        """
        Hides one of the user's variations from the catalog.

        Raises:
            NotFoundError: not found, not owned or already archived
        """
        async with atomic(db, "archive variation"):
            variation = await self._get_active_variation(db, user_id, variation_id)
            variation.archived = True
        logger.info("Variation %s archived by user %s", variation_id, user_id)
        return variation

    async def archive_product(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> int:
        """
        Hides a whole product for the user and archives the user's
        variations of it.

        Returns:
            Number of variations archived

        Raises:
            NotFoundError: the product does not exist
        """
        async with atomic(db, "archive product"):
            product = await db.get(Product, product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")

            marker = (
                await db.execute(
                    select(ArchivedProduct).where(
                        ArchivedProduct.user_id == user_id,
                        ArchivedProduct.product_id == product_id,
                    )
                )
            ).scalar_one_or_none()
            if marker is None:
                marker = ArchivedProduct(user_id=user_id, product_id=product_id)
                db.add(marker)
            marker.archived = True
            marker.archived_at = datetime.now(timezone.utc)

            result = await db.execute(
                update(ProductVariation)
                .where(
                    ProductVariation.user_id == user_id,
                    ProductVariation.product_id == product_id,
                    ProductVariation.archived.is_(False),
                )
                .values(archived=True)
                .execution_options(synchronize_session=False)
            )
            archived = result.rowcount or 0

        logger.info(
            "Product %s archived by user %s (%s variations)",
            product_id, user_id, archived,
        )
        return archived

    # ------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------

    async def seed_user_catalog(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> SeedResult:
        """
        Copies the default variations (`user_id IS NULL`) to the user.

        Does nothing when the user already owns variations, so it can be
        called again safely.
        """
        async with atomic(db, "seed user catalog"):
            owned = (
                await db.execute(
                    select(ProductVariation.id)
                    .where(ProductVariation.user_id == user_id)
                    .limit(1)
                )
            ).first()
            if owned is not None:
                return SeedResult(copied=0)

            defaults = (
                await db.execute(
                    select(ProductVariation).where(
                        ProductVariation.user_id.is_(None),
                        ProductVariation.archived.is_(False),
                    )
                )
            ).scalars().all()

            db.add_all(
                ProductVariation(
                    product_id=default.product_id,
                    user_id=user_id,
                    size=default.size,
                    accessory=default.accessory,
                    quantity=default.quantity,
                    price=default.price,
                )
                for default in defaults
            )

        logger.info("Seeded %s default variations for user %s", len(defaults), user_id)
        return SeedResult(copied=len(defaults))
