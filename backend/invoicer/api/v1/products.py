"""
FastAPI router for the product catalog
Project: Invoicer (Estimates & Invoices backend)
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.catalog import (
    ProductRead,
    SeedResult,
    VariationCreate,
    VariationPriceUpdate,
    VariationRead,
)
from invoicer.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

catalog_service = CatalogService()

router = APIRouter(
    prefix="/products",
    tags=["Catalog"],
)


@router.get(
    "/",
    summary="Catalog",
    description="Products with the caller's variations; archived entries are hidden.",
    response_model=list[ProductRead],
    status_code=status.HTTP_200_OK,
)
async def get_products(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> list[ProductRead]:
    return await catalog_service.list_products(db, user_id)


@router.post(
    "/seed",
    summary="Seed catalog",
    description="Copies the default variations to the caller (only once).",
    response_model=SeedResult,
    status_code=status.HTTP_200_OK,
)
async def seed_catalog(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> SeedResult:
    return await catalog_service.seed_user_catalog(db, user_id)


@router.post(
    "/{product_id}/variations",
    summary="Add variation",
    response_model=VariationRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_variation(
    data: VariationCreate,
    user_id: CurrentUserId,
    product_id: uuid.UUID = Path(..., description="Product UUID"),
    db: AsyncSession = Depends(get_db),
) -> VariationRead:
    variation = await catalog_service.add_variation(db, user_id, product_id, data)
    return VariationRead.model_validate(variation)


@router.put(
    "/variations/{variation_id}/price",
    summary="Reprice variation",
    description="Existing documents keep the price stored on their lines.",
    response_model=VariationRead,
    status_code=status.HTTP_200_OK,
)
async def update_variation_price(
    data: VariationPriceUpdate,
    user_id: CurrentUserId,
    variation_id: uuid.UUID = Path(..., description="Variation UUID"),
    db: AsyncSession = Depends(get_db),
) -> VariationRead:
    variation = await catalog_service.update_price(db, user_id, variation_id, data.price)
    return VariationRead.model_validate(variation)


@router.delete(
    "/variations/{variation_id}",
    summary="Archive variation",
    response_model=VariationRead,
    status_code=status.HTTP_200_OK,
)
async def archive_variation(
    user_id: CurrentUserId,
    variation_id: uuid.UUID = Path(..., description="Variation UUID"),
    db: AsyncSession = Depends(get_db),
) -> VariationRead:
    variation = await catalog_service.archive_variation(db, user_id, variation_id)
    return VariationRead.model_validate(variation)


@router.post(
    "/{product_id}/archive",
    summary="Archive product",
    description="Hides the product for the caller and archives the caller's variations of it.",
    status_code=status.HTTP_200_OK,
)
async def archive_product(
    user_id: CurrentUserId,
    product_id: uuid.UUID = Path(..., description="Product UUID"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, int]:
    archived = await catalog_service.archive_product(db, user_id, product_id)
    return {"archived_variations": archived}
