"""
FastAPI dependencies wiring repositories and domain services per request.
All repositories of one request share the same session, hence one transaction.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from crudhub.config import Settings
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.domain.services.numbering_service import NumberingService
from crudhub.infrastructure.db.database import get_db
from crudhub.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from crudhub.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from crudhub.infrastructure.repositories.category_repository import SQLAlchemyCategoryRepository
from crudhub.infrastructure.repositories.product_repository import SQLAlchemyProductRepository


def get_app_settings(request: Request) -> Settings:
    """Dependency to get the settings the application was built with."""
    return request.app.state.settings


def get_client_repository(session: Session = Depends(get_db)) -> SQLAlchemyClientRepository:
    """Dependency to get client repository."""
    return SQLAlchemyClientRepository(session)


def get_invoice_repository(session: Session = Depends(get_db)) -> SQLAlchemyInvoiceRepository:
    """Dependency to get invoice repository."""
    return SQLAlchemyInvoiceRepository(session)


def get_category_repository(session: Session = Depends(get_db)) -> SQLAlchemyCategoryRepository:
    """Dependency to get category repository."""
    return SQLAlchemyCategoryRepository(session)


def get_product_repository(session: Session = Depends(get_db)) -> SQLAlchemyProductRepository:
    """Dependency to get product repository."""
    return SQLAlchemyProductRepository(session)


def get_lifecycle_service() -> InvoiceLifecycleService:
    return InvoiceLifecycleService()


def get_numbering_service() -> NumberingService:
    return NumberingService()
