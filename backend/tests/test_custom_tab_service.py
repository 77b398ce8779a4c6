"""
Custom tab tests.

Per-user tabs of custom line templates with a default taxable flag.
"""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from invoicer.core.exceptions import NotFoundError
from invoicer.schemas.custom_tab import CustomTabCreate, CustomTabRead, CustomTabUpdate
from invoicer.services.custom_tab_service import CustomTabService


@pytest.fixture
def service():
    return CustomTabService()


def yard_signs(**extra):
    payload = {
        "name": " Yard signs ",
        "description": "Corrugated plastic",
        "variations": [
            {"size": "18x24", "price": "12,50", "accessory": "H-stake"},
            {"size": "24x36", "price": 20},
        ],
        "taxable": "false",
    }
    payload.update(extra)
    return CustomTabCreate.model_validate(payload)


# ============================================================
# Schemas
# ============================================================


class TestCustomTabSchemas:
    """Request coercion."""

    def test_create_coercion(self):
        data = yard_signs()

        assert data.name == "Yard signs"
        assert data.taxable is False
        assert data.variations[0].price == Decimal("12.50")

    def test_taxable_defaults_to_true(self):
        assert CustomTabCreate(name="Decals").taxable is True
        assert CustomTabCreate(name="Decals", taxable="maybe").taxable is True

    def test_name_required(self):
        with pytest.raises(ValidationError):
            CustomTabCreate(name="   ")

    def test_negative_template_price(self):
        data = CustomTabCreate.model_validate({"name": "Decals", "variations": [{"price": "-3"}]})
        assert data.variations[0].price == Decimal("0")


# ============================================================
# Service
# ============================================================


class TestCustomTabService:
    """CRUD scoped to the caller."""

    async def test_create_and_list(self, service, db, user_id, other_user_id):
        await service.create(db, user_id, yard_signs())
        await service.create(db, user_id, CustomTabCreate(name="Decals"))

        tabs = [CustomTabRead.model_validate(t) for t in await service.get_all(db, user_id)]

        assert [t.name for t in tabs] == ["Yard signs", "Decals"]
        assert tabs[0].taxable is False
        assert tabs[0].variations[0].size == "18x24"
        assert tabs[0].variations[0].price == Decimal("12.50")
        assert tabs[1].taxable is True
        assert await service.get_all(db, other_user_id) == []

    async def test_partial_update(self, service, db, user_id):
        tab = await service.create(db, user_id, yard_signs())

        updated = await service.update(db, user_id, tab.id, CustomTabUpdate(description="Outdoor"))

        assert updated.name == "Yard signs"
        assert updated.description == "Outdoor"
        assert updated.taxable is False
        assert len(updated.variations) == 2

    async def test_update_replaces_variations_and_flag(self, service, db, user_id):
        tab = await service.create(db, user_id, yard_signs())

        data = CustomTabUpdate.model_validate({"variations": [{"size": "4x8"}], "taxable": "true", "name": " "})
        updated = await service.update(db, user_id, tab.id, data)

        assert updated.name == "Yard signs"
        assert updated.taxable is True
        assert [v["size"] for v in updated.variations] == ["4x8"]

    async def test_foreign_tab(self, service, db, user_id, other_user_id):
        tab = await service.create(db, user_id, yard_signs())

        with pytest.raises(NotFoundError):
            await service.update(db, other_user_id, tab.id, CustomTabUpdate(name="Mine"))
        with pytest.raises(NotFoundError):
            await service.delete(db, other_user_id, tab.id)

        assert len(await service.get_all(db, user_id)) == 1

    async def test_delete(self, service, db, user_id):
        tab = await service.create(db, user_id, yard_signs())

        await service.delete(db, user_id, tab.id)

        assert await service.get_all(db, user_id) == []
        with pytest.raises(NotFoundError):
            await service.delete(db, user_id, uuid.uuid4())


# ============================================================
# API
# ============================================================


class TestCustomTabsApi:
    """Custom tab endpoints."""

    async def test_crud(self, client, auth_headers):
        created = await client.post(
            "/api/v1/custom-tabs/",
            json={"name": "Decals", "variations": [{"size": "12x12", "price": "4"}]},
            headers=auth_headers,
        )
        assert created.status_code == 201
        tab_id = created.json()["id"]
        assert created.json()["taxable"] is True

        updated = await client.put(f"/api/v1/custom-tabs/{tab_id}", json={"taxable": False}, headers=auth_headers)
        assert updated.json()["taxable"] is False
        assert updated.json()["variations"][0]["size"] == "12x12"

        deleted = await client.delete(f"/api/v1/custom-tabs/{tab_id}", headers=auth_headers)
        assert deleted.status_code == 204
        assert (await client.get("/api/v1/custom-tabs/", headers=auth_headers)).json() == []

    async def test_missing_name(self, client, auth_headers):
        response = await client.post("/api/v1/custom-tabs/", json={"description": "x"}, headers=auth_headers)
        assert response.status_code == 422

    async def test_foreign_tab_not_found(self, client, auth_headers, other_auth_headers):
        created = await client.post("/api/v1/custom-tabs/", json={"name": "Decals"}, headers=auth_headers)
        tab_id = created.json()["id"]

        response = await client.put(f"/api/v1/custom-tabs/{tab_id}", json={"name": "X"}, headers=other_auth_headers)
        assert response.status_code == 404
