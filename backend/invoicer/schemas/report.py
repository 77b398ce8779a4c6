"""
Pydantic schemas for the sales report
Project: Invoicer (Estimates & Invoices backend)
"""

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from invoicer.schemas.document import InvoiceRead


class SalesReport(BaseModel):
    """
    Invoices of a date range with their items.

    Both bounds are optional and inclusive. `total_sales` is the sum of
    the invoice totals.
    """

    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    invoice_count: int = Field(..., ge=0)
    total_sales: Decimal
    invoices: List[InvoiceRead] = Field(default_factory=list)
