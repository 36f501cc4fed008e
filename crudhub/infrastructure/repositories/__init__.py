"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .client_repository import SQLAlchemyClientRepository
from .invoice_repository import SQLAlchemyInvoiceRepository
from .category_repository import SQLAlchemyCategoryRepository
from .product_repository import SQLAlchemyProductRepository

__all__ = [
    "SQLAlchemyClientRepository",
    "SQLAlchemyInvoiceRepository",
    "SQLAlchemyCategoryRepository",
    "SQLAlchemyProductRepository",
]
