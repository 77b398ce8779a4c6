"""
Pydantic schemas for Invoicer

Request validation and response serialization for the API.
"""

# Re-exported for direct imports
# e.g.: from invoicer.schemas import EstimateWrite, InvoiceRead

from invoicer.schemas.token import TokenPayload
from invoicer.schemas.document import (
    ConvertRequest,
    ConvertResponse,
    CustomItemIn,
    DiscountType,
    EstimateNotesUpdate,
    EstimateRead,
    EstimateSavedResponse,
    EstimateSummary,
    EstimateWrite,
    InvoiceRead,
    InvoiceSavedResponse,
    InvoiceSummary,
    InvoiceWrite,
    LineItemRead,
    LineType,
    VariationItemIn,
)
from invoicer.schemas.catalog import (
    ProductRead,
    SeedResult,
    VariationCreate,
    VariationPriceUpdate,
    VariationRead,
)
from invoicer.schemas.store import StoreSettingsRead, StoreSettingsUpdate
from invoicer.schemas.customer import CustomerRead, CustomerUpdate, CustomerUpsert
from invoicer.schemas.custom_tab import CustomTabCreate, CustomTabRead, CustomTabUpdate, TabVariation
from invoicer.schemas.report import SalesReport

__all__ = [
    # Token
    "TokenPayload",
    # Documents
    "ConvertRequest",
    "ConvertResponse",
    "CustomItemIn",
    "DiscountType",
    "EstimateNotesUpdate",
    "EstimateRead",
    "EstimateSavedResponse",
    "EstimateSummary",
    "EstimateWrite",
    "InvoiceRead",
    "InvoiceSavedResponse",
    "InvoiceSummary",
    "InvoiceWrite",
    "LineItemRead",
    "LineType",
    "VariationItemIn",
    # Catalog
    "ProductRead",
    "SeedResult",
    "VariationCreate",
    "VariationPriceUpdate",
    "VariationRead",
    # Store
    "StoreSettingsRead",
    "StoreSettingsUpdate",
    # Customers
    "CustomerRead",
    "CustomerUpdate",
    "CustomerUpsert",
    # Custom tabs
    "CustomTabCreate",
    "CustomTabRead",
    "CustomTabUpdate",
    "TabVariation",
    # Reports
    "SalesReport",
]
