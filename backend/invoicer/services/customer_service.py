"""
Service layer for the customer directory
Project: Invoicer (Estimates & Invoices backend)
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import atomic
from invoicer.core.exceptions import NotFoundError
from invoicer.models import Customer
from invoicer.schemas.customer import CustomerUpdate, CustomerUpsert

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class CustomerService:
    """
    Service for the caller's customer directory.

    Customers are matched for upserts by their (name, company) pair.
    """

    async def search(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        q: Optional[str] = None,
        limit: int = SEARCH_LIMIT,
    ) -> List[Customer]:
        """
        Case-insensitive search on name, company, email and phone.

        Only the most recent entry of each (name, company) pair is kept.
        """
        stmt = select(Customer).where(Customer.user_id == user_id)
        if q and q.strip():
            pattern = f"%{q.strip()}%"
            stmt = stmt.where(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.company.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Customer.phone.ilike(pattern),
                )
            )
        stmt = stmt.order_by(Customer.name, Customer.company, Customer.created_at.desc())

        customers = []
        seen = set()
        for customer in (await db.execute(stmt)).scalars():
            key = (customer.name, customer.company)
            if key in seen:
                continue
            seen.add(key)
            customers.append(customer)
            if len(customers) >= limit:
                break
        return customers

    async def upsert(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: CustomerUpsert,
    ) -> Customer:
        """
        Creates the customer, or updates the contact fields of the
        existing customer with the same name and company.
        """
        name = data.name or ""
        company = data.company or ""

        async with atomic(db, "upsert customer"):
            result = await db.execute(
                select(Customer)
                .where(
                    Customer.user_id == user_id,
                    Customer.name == name,
                    Customer.company == company,
                )
                .order_by(Customer.created_at.desc())
                .limit(1)
            )
            customer = result.scalar_one_or_none()
            if customer is None:
                customer = Customer(user_id=user_id, name=name, company=company)
                db.add(customer)
                logger.info("New customer %r / %r for user %s", name, company, user_id)

            customer.email = data.email or ""
            customer.phone = data.phone or ""
            customer.address = data.address or ""

        return customer

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        customer_id: uuid.UUID,
        data: CustomerUpdate,
    ) -> Customer:
        """
        Updates the fields present in the request.

        Raises:
            NotFoundError: the customer is not in the caller's directory
        """
        async with atomic(db, "update customer"):
            result = await db.execute(
                select(Customer).where(
                    Customer.id == customer_id,
                    Customer.user_id == user_id,
                )
            )
            customer = result.scalar_one_or_none()
            if customer is None:
                raise NotFoundError("Customer not found")

            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(customer, field, value or "")

        return customer
