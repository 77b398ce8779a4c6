"""
API Routes
Project: Invoicer (Estimates & Invoices backend)

Aggregation of the versioned routers.
"""

from invoicer.api.v1 import api_v1_router

__all__ = ["api_v1_router"]
