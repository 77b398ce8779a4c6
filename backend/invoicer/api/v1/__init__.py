"""
API v1 Routes
Project: Invoicer (Estimates & Invoices backend)

Version 1 of the API.
"""

from fastapi import APIRouter

from invoicer.api.v1 import (
    custom_tabs,
    customers,
    estimates,
    invoices,
    products,
    reports,
    store,
)

# Aggregated v1 router
api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(estimates.router)
api_v1_router.include_router(invoices.router)
api_v1_router.include_router(products.router)
api_v1_router.include_router(store.router)
api_v1_router.include_router(customers.router)
api_v1_router.include_router(custom_tabs.router)
api_v1_router.include_router(reports.router)

__all__ = ["api_v1_router"]
