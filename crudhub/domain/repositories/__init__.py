"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .client_repository import ClientRepository
from .invoice_repository import InvoiceRepository
from .category_repository import CategoryRepository
from .product_repository import ProductRepository

__all__ = [
    "ClientRepository",
    "InvoiceRepository",
    "CategoryRepository",
    "ProductRepository",
]
