"""
Invoice mapper for converting between domain entities and database models.
"""

from crudhub.domain.models.invoice import Invoice, InvoiceStatus
from crudhub.infrastructure.db.models import InvoiceModel


class InvoiceMapper:
    """Maps between Invoice domain entity and InvoiceModel database model."""

    def domain_to_model(self, invoice: Invoice) -> InvoiceModel:
        """Convert Invoice domain entity to InvoiceModel."""
        return InvoiceModel(
            id=invoice.id,
            number=invoice.number,
            client_id=invoice.client_id,
            amount=invoice.amount,
            status=invoice.status.value,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            description=invoice.description,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
            deleted_at=invoice.deleted_at
        )

    def model_to_domain(self, model: InvoiceModel) -> Invoice:
        """Convert InvoiceModel to Invoice domain entity."""
        return Invoice(
            id=model.id,
            number=model.number,
            client_id=model.client_id,
            amount=model.amount,
            status=InvoiceStatus(model.status) if model.status else InvoiceStatus.DRAFT,
            issue_date=model.issue_date,
            due_date=model.due_date,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at
        )

    def update_model(self, model: InvoiceModel, invoice: Invoice) -> None:
        """
        Copy mutable invoice fields onto an existing model.
        The number and client never change after creation.
        """
        model.amount = invoice.amount
        model.status = invoice.status.value
        model.issue_date = invoice.issue_date
        model.due_date = invoice.due_date
        model.description = invoice.description
        model.updated_at = invoice.updated_at
        model.deleted_at = invoice.deleted_at
