"""
FastAPI router for invoices
Project: Invoicer (Estimates & Invoices backend)

Endpoints for invoices: listing with customer filter and search, CRUD
with full line replacement and an optional discount, normalized items.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.document import (
    InvoiceRead,
    InvoiceSavedResponse,
    InvoiceSummary,
    InvoiceWrite,
    LineItemRead,
)
from invoicer.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

invoice_service = InvoiceService()

router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"],
)


# -------------------------------------------------------------------
# Invoices
# -------------------------------------------------------------------

@router.get(
    "/",
    summary="List invoices",
    description=(
        "Returns the caller's invoices, newest first. `customer_id` filters "
        "on one customer; otherwise `q` searches the customer name, company, "
        "email and phone."
    ),
    response_model=list[InvoiceSummary],
    status_code=status.HTTP_200_OK,
)
async def get_invoices(
    user_id: CurrentUserId,
    customer_id: Optional[uuid.UUID] = Query(None, description="Customer UUID"),
    q: Optional[str] = Query(None, max_length=200, description="Free text search"),
    db: AsyncSession = Depends(get_db),
) -> list[InvoiceSummary]:
    return await invoice_service.get_all(db, user_id, customer_id=customer_id, q=q)


@router.post(
    "/",
    summary="Create invoice",
    description=(
        "Creates an invoice from catalog and custom lines with an optional "
        "discount. The total is computed server side."
    ),
    response_model=InvoiceSavedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    data: InvoiceWrite,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> InvoiceSavedResponse:
    return await invoice_service.create(db, user_id, data)


@router.get(
    "/{invoice_id}",
    summary="Invoice detail",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def get_invoice(
    user_id: CurrentUserId,
    invoice_id: uuid.UUID = Path(..., description="Invoice UUID"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    return await invoice_service.get_by_id(db, user_id, invoice_id)


@router.put(
    "/{invoice_id}",
    summary="Update invoice",
    description="Updates an invoice. All lines are replaced by the ones in the request.",
    response_model=InvoiceSavedResponse,
    status_code=status.HTTP_200_OK,
)
async def update_invoice(
    data: InvoiceWrite,
    user_id: CurrentUserId,
    invoice_id: uuid.UUID = Path(..., description="Invoice UUID"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceSavedResponse:
    return await invoice_service.update(db, user_id, invoice_id, data)


@router.get(
    "/{invoice_id}/items",
    summary="Invoice items",
    description="Returns the normalized lines of an invoice, in order.",
    response_model=list[LineItemRead],
    status_code=status.HTTP_200_OK,
)
async def get_invoice_items(
    user_id: CurrentUserId,
    invoice_id: uuid.UUID = Path(..., description="Invoice UUID"),
    db: AsyncSession = Depends(get_db),
) -> list[LineItemRead]:
    return await invoice_service.get_items(db, user_id, invoice_id)


@router.delete(
    "/{invoice_id}",
    summary="Delete invoice",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_invoice(
    user_id: CurrentUserId,
    invoice_id: uuid.UUID = Path(..., description="Invoice UUID"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await invoice_service.delete(db, user_id, invoice_id)
