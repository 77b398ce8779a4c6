"""
Service layer for the store settings
Project: Invoicer (Estimates & Invoices backend)

Per-user store identity and the tax rate used by the totals.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.config import settings
from invoicer.core.database import atomic
from invoicer.models import StoreSettings
from invoicer.schemas.store import StoreSettingsRead, StoreSettingsUpdate
from invoicer.services.totals import sanitize_tax_rate

logger = logging.getLogger(__name__)


class StoreService:
    """Service for the caller's store settings."""

    async def _get_row(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> Optional[StoreSettings]:
        result = await db.execute(
            select(StoreSettings).where(StoreSettings.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_tax_rate(self, db: AsyncSession, user_id: uuid.UUID) -> Decimal:
        """
        Returns the user's tax rate as a fraction in [0, 1].

        Missing settings or an out of range stored value fall back to
        the configured default (0.06).
        """
        row = await self._get_row(db, user_id)
        stored = row.tax_rate if row is not None else None
        return sanitize_tax_rate(stored, settings.default_tax_rate)

    async def get_settings(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> StoreSettingsRead:
        """Returns the store settings, with defaults when none are saved."""
        row = await self._get_row(db, user_id)
        if row is None:
            return StoreSettingsRead(tax_rate=settings.default_tax_rate)
        return StoreSettingsRead(
            name=row.name,
            address=row.address,
            phone=row.phone,
            email=row.email,
            tax_rate=sanitize_tax_rate(row.tax_rate, settings.default_tax_rate),
        )

    async def upsert_settings(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: StoreSettingsUpdate,
    ) -> StoreSettingsRead:
        """
        Creates or updates the store settings of the user.

        Only the fields present in the request are changed.
        """
        changes = data.model_dump(exclude_unset=True)

        async with atomic(db, "save store settings"):
            row = await self._get_row(db, user_id)
            if row is None:
                row = StoreSettings(user_id=user_id)
                db.add(row)
            for field, value in changes.items():
                if field == "tax_rate":
                    row.tax_rate = value
                else:
                    setattr(row, field, value or "")

        logger.info("Store settings saved for user %s", user_id)
        return await self.get_settings(db, user_id)
