"""
Domain models for the billing and catalog service.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    DomainEvent,
    DomainException,
    ValidationError,
    TransitionError,
    ReferentialGuardError,
    EntityNotFoundError,
    DuplicateEntityError,
    ConcurrencyConflictError,
    ValueObject,
    Email
)

from .client import (
    Client,
    ClientPatch,
    ClientCreatedEvent,
    ClientUpdatedEvent,
    ClientDeletedEvent
)

from .invoice import (
    Invoice,
    InvoicePatch,
    InvoiceNumber,
    InvoiceStatus,
    ALLOWED_TRANSITIONS,
    InvoiceCreatedEvent,
    InvoiceStatusChangedEvent,
    InvoiceDeletedEvent
)

from .category import Category, CategoryPatch
from .product import Product, ProductPatch

__all__ = [
    "BaseEntity",
    "DomainEvent",
    "DomainException",
    "ValidationError",
    "TransitionError",
    "ReferentialGuardError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "ConcurrencyConflictError",
    "ValueObject",
    "Email",
    "Client",
    "ClientPatch",
    "ClientCreatedEvent",
    "ClientUpdatedEvent",
    "ClientDeletedEvent",
    "Invoice",
    "InvoicePatch",
    "InvoiceNumber",
    "InvoiceStatus",
    "ALLOWED_TRANSITIONS",
    "InvoiceCreatedEvent",
    "InvoiceStatusChangedEvent",
    "InvoiceDeletedEvent",
    "Category",
    "CategoryPatch",
    "Product",
    "ProductPatch",
]
