"""
Service layer for estimates
Project: Invoicer (Estimates & Invoices backend)

Defines the business logic of estimates: listing, reading with the
normalized lines, create and update with full line replacement,
notes-only updates and deletion. Conversion to an invoice lives in
`conversion_service`.
"""

import logging
import uuid
from typing import Any, List, Set

from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import atomic
from invoicer.schemas.document import (
    EstimateNotesUpdate,
    EstimateRead,
    EstimateSavedResponse,
    EstimateSummary,
    EstimateWrite,
)
from invoicer.services.document_service import DocumentService
from invoicer.services.document_store import ESTIMATE

logger = logging.getLogger(__name__)


class EstimateService(DocumentService):
    """
    Service for estimate operations.

    Every operation is scoped to the calling user; a foreign or missing
    estimate raises AuthorizationError (403) everywhere.
    """

    kind = ESTIMATE

    def _apply_header(self, document: Any, data: EstimateWrite, fields: Set[str]) -> None:
        if "customer_id" in fields:
            document.customer_id = data.customer_id
        if "customer_info" in fields or "customer_id" in fields:
            document.customer_info = data.customer_info or {}
        if "notes" in fields:
            document.notes = data.notes

    async def get_all(self, db: AsyncSession, user_id: uuid.UUID) -> List[EstimateSummary]:
        """Returns the caller's estimates, newest first."""
        estimates = await self.store.list_owned(db, user_id)
        return [EstimateSummary.model_validate(estimate) for estimate in estimates]

    async def get_by_id(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        estimate_id: uuid.UUID,
    ) -> EstimateRead:
        """
        Returns an estimate with its total and normalized lines.

        Raises:
            AuthorizationError: foreign or missing estimate
        """
        estimate = await self.store.get_owned(db, user_id, estimate_id)
        items = await self.store.read_items(db, estimate)
        return EstimateRead.model_validate(estimate).model_copy(update={"items": items})

    async def create(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: EstimateWrite,
    ) -> EstimateSavedResponse:
        """
        Creates an estimate: header, resolved lines and derived total in
        one transaction.

        Args:
            db: Database session
            user_id: Owner
            data: Validated request (notes already checked against the cap)

        Returns:
            EstimateSavedResponse: id and degraded-lookup warnings

        Raises:
            PersistenceError: database failure (nothing is written)
        """
        estimate, warnings = await self._create(db, user_id, data)
        return EstimateSavedResponse(estimate_id=estimate.id, warnings=warnings)

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        estimate_id: uuid.UUID,
        data: EstimateWrite,
    ) -> EstimateSavedResponse:
        """
        Updates an estimate, replacing ALL of its lines.

        An empty line list leaves the estimate with no lines and a zero
        total.

        Raises:
            AuthorizationError: foreign or missing estimate
            PersistenceError: database failure (estimate unchanged)
        """
        estimate, warnings = await self._update(db, user_id, estimate_id, data)
        return EstimateSavedResponse(estimate_id=estimate.id, warnings=warnings)

    async def update_notes(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        estimate_id: uuid.UUID,
        data: EstimateNotesUpdate,
    ) -> EstimateSummary:
        """
        Changes only the notes of an estimate. Lines and total are untouched.

        Raises:
            AuthorizationError: foreign or missing estimate
        """
        async with atomic(db, "update estimate notes"):
            estimate = await self.store.get_owned(db, user_id, estimate_id, for_update=True)
            estimate.notes = data.notes
        return EstimateSummary.model_validate(estimate)
