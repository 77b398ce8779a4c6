"""
FastAPI router for the customer directory
Project: Invoicer (Estimates & Invoices backend)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.customer import CustomerRead, CustomerUpdate, CustomerUpsert
from invoicer.services.customer_service import CustomerService

customer_service = CustomerService()

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


@router.get(
    "/",
    summary="Search customers",
    description="Searches name, company, email and phone (at most 10 results).",
    response_model=list[CustomerRead],
    status_code=status.HTTP_200_OK,
)
async def search_customers(
    user_id: CurrentUserId,
    q: Optional[str] = Query(None, max_length=200, description="Free text search"),
    db: AsyncSession = Depends(get_db),
) -> list[CustomerRead]:
    customers = await customer_service.search(db, user_id, q)
    return [CustomerRead.model_validate(c) for c in customers]


@router.post(
    "/upsert",
    summary="Create or update customer",
    description="Matches an existing customer by name and company.",
    response_model=CustomerRead,
    status_code=status.HTTP_200_OK,
)
async def upsert_customer(
    data: CustomerUpsert,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
) -> CustomerRead:
    customer = await customer_service.upsert(db, user_id, data)
    return CustomerRead.model_validate(customer)


@router.put(
    "/{customer_id}",
    summary="Update customer",
    response_model=CustomerRead,
    status_code=status.HTTP_200_OK,
)
async def update_customer(
    data: CustomerUpdate,
    user_id: CurrentUserId,
    customer_id: uuid.UUID = Path(..., description="Customer UUID"),
    db: AsyncSession = Depends(get_db),
) -> CustomerRead:
    customer = await customer_service.update(db, user_id, customer_id, data)
    return CustomerRead.model_validate(customer)
