"""
FastAPI router for estimates
Project: Invoicer (Estimates & Invoices backend)

Endpoints for estimates: CRUD with full line replacement, notes-only
updates, normalized items and conversion to an invoice.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.document import (
    ConvertRequest,
    ConvertResponse,
    EstimateNotesUpdate,
    EstimateRead,
    EstimateSavedResponse,
    EstimateSummary,
    EstimateWrite,
    LineItemRead,
)
from invoicer.services.conversion_service import ConversionService
from invoicer.services.estimate_service import EstimateService

logger = logging.getLogger(__name__)

# Service instances
estimate_service = EstimateService()
conversion_service = ConversionService()

router = APIRouter(
    prefix="/estimates",
    tags=["Estimates"],
)


# -------------------------------------------------------------------
# Estimates
# -------------------------------------------------------------------

@router.get(
    "/",
    summary="List estimates",
    description="Returns the caller's estimates, newest first.",
    response_model=list[EstimateSummary],
    status_code=status.HTTP_200_OK,
)
async def get_estimates(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> list[EstimateSummary]:
    return await estimate_service.get_all(db, user_id)


@router.post(
    "/",
    summary="Create estimate",
    description=(
        "Creates an estimate from catalog and custom lines. The total is "
        "computed server side; unresolved catalog references are reported "
        "in `warnings`."
    ),
    response_model=EstimateSavedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_estimate(
    data: EstimateWrite,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> EstimateSavedResponse:
    return await estimate_service.create(db, user_id, data)


@router.get(
    "/{estimate_id}",
    summary="Estimate detail",
    response_model=EstimateRead,
    status_code=status.HTTP_200_OK,
)
async def get_estimate(
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    db: AsyncSession = Depends(get_db),
) -> EstimateRead:
    return await estimate_service.get_by_id(db, user_id, estimate_id)


@router.put(
    "/{estimate_id}",
    summary="Update estimate",
    description="Updates an estimate. All lines are replaced by the ones in the request.",
    response_model=EstimateSavedResponse,
    status_code=status.HTTP_200_OK,
)
async def update_estimate(
    data: EstimateWrite,
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    db: AsyncSession = Depends(get_db),
) -> EstimateSavedResponse:
    return await estimate_service.update(db, user_id, estimate_id, data)


@router.patch(
    "/{estimate_id}/notes",
    summary="Update estimate notes",
    response_model=EstimateSummary,
    status_code=status.HTTP_200_OK,
)
async def update_estimate_notes(
    data: EstimateNotesUpdate,
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    db: AsyncSession = Depends(get_db),
) -> EstimateSummary:
    return await estimate_service.update_notes(db, user_id, estimate_id, data)


@router.get(
    "/{estimate_id}/items",
    summary="Estimate items",
    description="Returns the normalized lines of an estimate, in order.",
    response_model=list[LineItemRead],
    status_code=status.HTTP_200_OK,
)
async def get_estimate_items(
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    db: AsyncSession = Depends(get_db),
) -> list[LineItemRead]:
    return await estimate_service.get_items(db, user_id, estimate_id)


@router.delete(
    "/{estimate_id}",
    summary="Delete estimate",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_estimate(
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await estimate_service.delete(db, user_id, estimate_id)


@router.post(
    "/{estimate_id}/convert-to-invoice",
    summary="Convert estimate to invoice",
    description=(
        "Creates an invoice from the estimate, applying the optional "
        "discount, and deletes the estimate. All or nothing."
    ),
    response_model=ConvertResponse,
    status_code=status.HTTP_201_CREATED,
)
async def convert_estimate(
    user_id: CurrentUserId,
    estimate_id: uuid.UUID = Path(..., description="Estimate UUID"),
    data: Optional[ConvertRequest] = None,
    db: AsyncSession = Depends(get_db),
) -> ConvertResponse:
    return await conversion_service.convert(db, user_id, estimate_id, data or ConvertRequest())
