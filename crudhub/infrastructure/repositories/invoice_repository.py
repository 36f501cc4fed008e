"""
Invoice repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from datetime import date

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudhub.domain.models.invoice import (
    Invoice, InvoiceNumber, InvoiceStatus, INVOICE_NUMBER_PREFIX, OVERDUE_ELIGIBLE_STATUSES
)
from crudhub.domain.repositories.invoice_repository import InvoiceRepository as InvoiceRepositoryInterface
from crudhub.domain.models.base import EntityNotFoundError, ConcurrencyConflictError
from crudhub.infrastructure.db.models import InvoiceModel
from crudhub.infrastructure.mappers.invoice_mapper import InvoiceMapper
from crudhub.infrastructure.repositories.base import SQLAlchemyRepository


class SQLAlchemyInvoiceRepository(SQLAlchemyRepository, InvoiceRepositoryInterface):
    """SQLAlchemy implementation of invoice repository."""

    model = InvoiceModel

    def __init__(self, session: Session):
        super().__init__(session)
        self.mapper = InvoiceMapper()

    async def add(self, invoice: Invoice) -> Invoice:
        """Insert a new invoice. The unique number constraint has the final word."""
        model = self.mapper.domain_to_model(invoice)
        self._write(invoice, model)

        invoice.id = model.id
        return invoice

    async def update(self, invoice: Invoice) -> Invoice:
        """Persist invoice changes."""
        model = self._get_model(invoice.id, include_deleted=True)
        if not model:
            raise EntityNotFoundError("Invoice", invoice.id)

        invoice.updated_at = self._now()
        self.mapper.update_model(model, invoice)
        self._write(invoice)
        return invoice

    async def find_by_id(self, invoice_id: int, include_deleted: bool = False) -> Optional[Invoice]:
        """Get invoice by ID."""
        model = self._get_model(invoice_id, include_deleted)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_number(self, number: str) -> Optional[Invoice]:
        """Get invoice by number, deleted or not."""
        model = self._query(include_deleted=True).filter(InvoiceModel.number == number).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def count_live_invoices_for_client(self, client_id: int) -> int:
        """Count live invoices referencing a client."""
        return self._query().with_entities(func.count(InvoiceModel.id)).filter(
            InvoiceModel.client_id == client_id
        ).scalar() or 0

    async def count_invoices_issued_on(self, issue_date: date, prefix: str = INVOICE_NUMBER_PREFIX) -> int:
        """Highest sequence taken under the day's number prefix, deleted invoices included."""
        day_prefix = InvoiceNumber.day_prefix(issue_date, prefix)
        rows = self._query(include_deleted=True).with_entities(InvoiceModel.number).filter(
            InvoiceModel.number.startswith(day_prefix, autoescape=True)
        ).all()
        return InvoiceNumber.last_sequence((number for (number,) in rows), day_prefix)

    async def list(
        self,
        offset: int = 0,
        limit: Optional[int] = 10,
        client_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        overdue_as_of: Optional[date] = None
    ) -> List[Invoice]:
        """Get invoices with filters and pagination."""
        query = self._filtered(client_id, status, overdue_as_of).order_by(InvoiceModel.id)
        models = query.offset(offset).limit(limit).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def count(
        self,
        client_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        overdue_as_of: Optional[date] = None
    ) -> int:
        """Get invoice count."""
        query = self._filtered(client_id, status, overdue_as_of)
        return query.with_entities(func.count(InvoiceModel.id)).scalar() or 0

    async def find_overdue_candidates(self, as_of: date) -> List[Invoice]:
        """Get live sent invoices due before as_of."""
        models = self._query().filter(
            InvoiceModel.status == InvoiceStatus.SENT.value,
            InvoiceModel.due_date.isnot(None),
            InvoiceModel.due_date < as_of
        ).order_by(InvoiceModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def soft_delete(self, invoice: Invoice) -> None:
        """Soft-delete an invoice."""
        model = self._get_model(invoice.id)
        if not model:
            raise EntityNotFoundError("Invoice", invoice.id)

        if invoice.deleted_at is None:
            invoice.mark_deleted(self._now())
        invoice.updated_at = invoice.deleted_at
        self.mapper.update_model(model, invoice)
        self._write(invoice)

    def _filtered(
        self,
        client_id: Optional[int],
        status: Optional[InvoiceStatus],
        overdue_as_of: Optional[date]
    ):
        query = self._query()
        if client_id is not None:
            query = query.filter(InvoiceModel.client_id == client_id)
        if status is not None:
            query = query.filter(InvoiceModel.status == InvoiceStatus(status).value)
        if overdue_as_of is not None:
            query = query.filter(
                InvoiceModel.status.in_([s.value for s in OVERDUE_ELIGIBLE_STATUSES]),
                InvoiceModel.due_date.isnot(None),
                InvoiceModel.due_date < overdue_as_of
            )
        return query

    def _translate_integrity_error(self, exc: IntegrityError, invoice: Invoice) -> Optional[Exception]:
        if self._violates(exc, "uq_invoices_number", "invoices.number"):
            return ConcurrencyConflictError(
                f"Invoice number {invoice.number} was taken by a concurrent request",
                constraint="uq_invoices_number"
            )
        return None
