"""
FastAPI router for custom tabs
Project: Invoicer (Estimates & Invoices backend)
"""

import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.custom_tab import CustomTabCreate, CustomTabRead, CustomTabUpdate
from invoicer.services.custom_tab_service import CustomTabService

custom_tab_service = CustomTabService()

router = APIRouter(
    prefix="/custom-tabs",
    tags=["Custom tabs"],
)


@router.get(
    "/",
    summary="List custom tabs",
    response_model=list[CustomTabRead],
    status_code=status.HTTP_200_OK,
)
async def get_custom_tabs(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> list[CustomTabRead]:
    tabs = await custom_tab_service.get_all(db, user_id)
    return [CustomTabRead.model_validate(tab) for tab in tabs]


@router.post(
    "/",
    summary="Create custom tab",
    response_model=CustomTabRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_custom_tab(
    data: CustomTabCreate,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> CustomTabRead:
    tab = await custom_tab_service.create(db, user_id, data)
    return CustomTabRead.model_validate(tab)


@router.put(
    "/{tab_id}",
    summary="Update custom tab",
    description="Omitted fields keep their value; a variations list replaces the current one.",
    response_model=CustomTabRead,
    status_code=status.HTTP_200_OK,
)
async def update_custom_tab(
    data: CustomTabUpdate,
    user_id: CurrentUserId,
    tab_id: uuid.UUID = Path(..., description="Custom tab UUID"),
    db: AsyncSession = Depends(get_db),
) -> CustomTabRead:
    tab = await custom_tab_service.update(db, user_id, tab_id, data)
    return CustomTabRead.model_validate(tab)


@router.delete(
    "/{tab_id}",
    summary="Delete custom tab",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_custom_tab(
    user_id: CurrentUserId,
    tab_id: uuid.UUID = Path(..., description="Custom tab UUID"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await custom_tab_service.delete(db, user_id, tab_id)
