"""
API routers.
"""

from . import clients, invoices, categories, products

__all__ = [
    "clients",
    "invoices",
    "categories",
    "products",
]
