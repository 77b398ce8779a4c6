"""
SQLAlchemy database models
Project: Invoicer (Estimates & Invoices backend)

Central import of every model, for metadata creation and general use.

Models:
- Product, ProductVariation, ArchivedProduct: shared catalog
- StoreSettings: per-user store identity and tax rate
- Customer: per-user customer directory
- CustomTab: per-user templates for custom lines
- Estimate, EstimateLine: estimates and their lines
- Invoice, InvoiceLine: invoices and their lines
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


from invoicer.models.catalog import ArchivedProduct, Product, ProductVariation
from invoicer.models.store import StoreSettings
from invoicer.models.customer import Customer
from invoicer.models.custom_tab import CustomTab
from invoicer.models.estimate import Estimate, EstimateLine
from invoicer.models.invoice import Invoice, InvoiceLine

__all__ = [
    "Base",
    "Product",
    "ProductVariation",
    "ArchivedProduct",
    "StoreSettings",
    "Customer",
    "CustomTab",
    "Estimate",
    "EstimateLine",
    "Invoice",
    "InvoiceLine",
]
