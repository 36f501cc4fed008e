"""
Mappers between domain entities and SQLAlchemy models.
"""

from .client_mapper import ClientMapper
from .invoice_mapper import InvoiceMapper
from .category_mapper import CategoryMapper
from .product_mapper import ProductMapper

__all__ = [
    "ClientMapper",
    "InvoiceMapper",
    "CategoryMapper",
    "ProductMapper",
]
