"""
Catalog service tests.

Lookups used by line resolution, per-user listing, variation
management, archiving and seeding of the default catalog.
"""

import uuid
from decimal import Decimal

import pytest

from invoicer.core.exceptions import BusinessValidationError, NotFoundError
from invoicer.schemas.catalog import VariationCreate
from invoicer.services.catalog_service import CatalogService


@pytest.fixture
def service():
    return CatalogService()


# ============================================================
# Lookup
# ============================================================


class TestCatalogLookup:
    """Price lookups."""

    async def test_entry(self, service, db, catalog):
        entry = await service.get_entry(db, catalog.banner.id)

        assert entry.variation_id == catalog.banner.id
        assert entry.product_name == "Vinyl Banner"
        assert entry.price == Decimal("10.00")
        assert entry.size == "3x6"

    async def test_missing_entry(self, service, db, catalog):
        assert await service.get_entry(db, uuid.uuid4()) is None

    async def test_lookup_not_scoped_to_owner(self, service, db, catalog):
        """Test that default catalog variations resolve too."""
        entry = await service.get_entry(db, catalog.default_banner.id)
        assert entry.price == Decimal("7.50")


# ============================================================
# Listing and variations
# ============================================================


class TestCatalogManagement:
    """Listing, adding, repricing and archiving."""

    async def test_list_own_variations(self, service, db, user_id, catalog):
        products = await service.list_products(db, user_id)

        assert [p.name for p in products] == ["Vinyl Banner"]
        assert [v.id for v in products[0].variations] == [catalog.banner.id]

    async def test_add_variation(self, service, db, user_id, catalog):
        data = VariationCreate(size="4x8", price=Decimal("15"))
        variation = await service.add_variation(db, user_id, catalog.product.id, data)

        assert variation.accessory == "None"
        products = await service.list_products(db, user_id)
        assert len(products[0].variations) == 2

    async def test_add_variation_requires_size_or_quantity(self, service, db, user_id, catalog):
        with pytest.raises(BusinessValidationError):
            await service.add_variation(db, user_id, catalog.product.id, VariationCreate(price=Decimal("1")))

    async def test_add_variation_unknown_product(self, service, db, user_id, catalog):
        with pytest.raises(NotFoundError):
            await service.add_variation(db, user_id, uuid.uuid4(), VariationCreate(size="1x1", price=Decimal("1")))

    async def test_update_price(self, service, db, user_id, catalog):
        variation = await service.update_price(db, user_id, catalog.banner.id, Decimal("12.50"))
        assert variation.price == Decimal("12.50")

        entry = await service.get_entry(db, catalog.banner.id)
        assert entry.price == Decimal("12.50")

    async def test_update_price_foreign_variation(self, service, db, other_user_id, catalog):
        with pytest.raises(NotFoundError):
            await service.update_price(db, other_user_id, catalog.banner.id, Decimal("1"))

    async def test_archive_variation(self, service, db, user_id, catalog):
        await service.archive_variation(db, user_id, catalog.banner.id)

        products = await service.list_products(db, user_id)
        assert products[0].variations == []
        with pytest.raises(NotFoundError):
            await service.archive_variation(db, user_id, catalog.banner.id)

    async def test_archived_variation_still_resolves(self, service, db, user_id, catalog):
        """Test that documents keep resolving archived variations."""
        await service.archive_variation(db, user_id, catalog.banner.id)
        assert await service.get_entry(db, catalog.banner.id) is not None

    async def test_archive_product(self, service, db, user_id, other_user_id, catalog):
        archived = await service.archive_product(db, user_id, catalog.product.id)

        assert archived == 1
        assert await service.list_products(db, user_id) == []
        assert len(await service.list_products(db, other_user_id)) == 1


# ============================================================
# Seeding
# ============================================================


class TestCatalogSeeding:
    """Copy of the default catalog."""

    async def test_seed_new_user(self, service, db, other_user_id, catalog):
        result = await service.seed_user_catalog(db, other_user_id)

        assert result.copied == 1
        products = await service.list_products(db, other_user_id)
        assert [v.price for v in products[0].variations] == [Decimal("7.50")]

    async def test_seed_is_idempotent(self, service, db, other_user_id, catalog):
        await service.seed_user_catalog(db, other_user_id)
        result = await service.seed_user_catalog(db, other_user_id)
        assert result.copied == 0

    async def test_seed_skipped_for_existing_catalog(self, service, db, user_id, catalog):
        result = await service.seed_user_catalog(db, user_id)
        assert result.copied == 0
