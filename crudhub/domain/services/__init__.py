"""
Domain services for the billing and catalog service.
This module exports the domain services holding cross-entity business rules.
"""

from .numbering_service import NumberingService
from .lifecycle_service import InvoiceLifecycleService

__all__ = [
    "NumberingService",
    "InvoiceLifecycleService",
]
