"""
FastAPI router for reports
Project: Invoicer (Estimates & Invoices backend)
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicer.core.database import get_db
from invoicer.core.deps import CurrentUserId
from invoicer.schemas.report import SalesReport
from invoicer.services.report_service import ReportService

report_service = ReportService()

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


@router.get(
    "/sales",
    summary="Sales report",
    description="Invoices between two dates (inclusive) with their items.",
    response_model=SalesReport,
    status_code=status.HTTP_200_OK,
)
async def get_sales_report(
    user_id: CurrentUserId,
    start_date: Optional[date] = Query(
        None,
        description="First day (YYYY-MM-DD)",
    ),
    end_date: Optional[date] = Query(
        None,
        description="Last day (YYYY-MM-DD)",
    ),
    db: AsyncSession = Depends(get_db),
) -> SalesReport:
    return await report_service.sales(db, user_id, start_date, end_date)
