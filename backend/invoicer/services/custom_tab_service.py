"""
Service layer for custom tabs
Project: Invoicer (Estimates & Invoices backend)

Per-user tabs of custom line templates, shown next to the shared
catalog. Lines built from a tab are saved as custom lines.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import atomic
from invoicer.core.exceptions import NotFoundError
from invoicer.models import CustomTab
from invoicer.schemas.custom_tab import CustomTabCreate, CustomTabUpdate

logger = logging.getLogger(__name__)


class CustomTabService:
    """Service for the caller's custom tabs."""

    async def _get_owned(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        tab_id: uuid.UUID,
    ) -> CustomTab:
        result = await db.execute(
            select(CustomTab)
            .where(CustomTab.id == tab_id, CustomTab.user_id == user_id)
            .with_for_update()
        )
        tab = result.scalar_one_or_none()
        if tab is None:
            raise NotFoundError("Tab not found or does not belong to user")
        return tab

    async def get_all(self, db: AsyncSession, user_id: uuid.UUID) -> List[CustomTab]:
        """Returns the caller's tabs, oldest first."""
        result = await db.execute(
            select(CustomTab)
            .where(CustomTab.user_id == user_id)
            .order_by(CustomTab.created_at, CustomTab.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: CustomTabCreate,
    ) -> CustomTab:
        async with atomic(db, "create custom tab"):
            tab = CustomTab(
                user_id=user_id,
                name=data.name,
                description=data.description,
                variations=[v.model_dump(mode="json") for v in data.variations],
                taxable=data.taxable,
            )
            db.add(tab)

        logger.info("Custom tab %s created by user %s", tab.id, user_id)
        return tab

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        tab_id: uuid.UUID,
        data: CustomTabUpdate,
    ) -> CustomTab:
        """
        Updates the fields present in the request.

        A variations list, when given, replaces the whole list.

        Raises:
            NotFoundError: the tab is not one of the caller's
        """
        async with atomic(db, "update custom tab"):
            tab = await self._get_owned(db, user_id, tab_id)
            if data.name is not None:
                tab.name = data.name
            if data.description is not None:
                tab.description = data.description
            if data.variations is not None:
                tab.variations = [v.model_dump(mode="json") for v in data.variations]
            if data.taxable is not None:
                tab.taxable = data.taxable
        return tab

    async def delete(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        tab_id: uuid.UUID,
    ) -> None:
        """
        Raises:
            NotFoundError: the tab is not one of the caller's
        """
        async with atomic(db, "delete custom tab"):
            tab = await self._get_owned(db, user_id, tab_id)
            await db.delete(tab)
        logger.info("Custom tab %s deleted by user %s", tab_id, user_id)
