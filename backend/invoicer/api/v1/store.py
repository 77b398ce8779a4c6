"""
FastAPI router for the store settings
Project: Invoicer (Estimates & Invoices backend)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.store import StoreSettingsRead, StoreSettingsUpdate
from invoicer.services.store_service import StoreService

store_service = StoreService()

router = APIRouter(
    prefix="/store-info",
    tags=["Store"],
)


@router.get(
    "/",
    summary="Store settings",
    description="Returns the caller's store settings; the tax rate falls back to 0.06.",
    response_model=StoreSettingsRead,
    status_code=status.HTTP_200_OK,
)
async def get_store_info(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> StoreSettingsRead:
    return await store_service.get_settings(db, user_id)


@router.post(
    "/",
    summary="Save store settings",
    response_model=StoreSettingsRead,
    status_code=status.HTTP_200_OK,
)
async def save_store_info(
    data: StoreSettingsUpdate,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> StoreSettingsRead:
    return await store_service.upsert_settings(db, user_id, data)
