"""
Invoice DTOs for the application layer.
Data Transfer Objects for invoice and billing operations.
"""

from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from pydantic import Field

from crudhub.domain.models.invoice import Invoice, InvoicePatch, InvoiceStatus
from .base_dto import (
    ResponseDTO, RequestDTO, CreateRequestDTO, UpdateRequestDTO, ListRequestDTO, PaginationDTO, BaseDTO
)


class CreateInvoiceRequestDTO(CreateRequestDTO):
    """DTO for creating a new invoice. The number is generated."""

    client_id: int = Field(description="Owning client ID")
    amount: Decimal = Field(max_digits=10, decimal_places=2, description="Invoice amount")
    status: Optional[InvoiceStatus] = Field(default=None, description="Initial status, draft by default")
    issue_date: Optional[date] = Field(default=None, description="Issue date, today by default")
    due_date: Optional[date] = Field(default=None, description="Due date")
    description: Optional[str] = Field(default=None, description="Invoice description")


class UpdateInvoiceRequestDTO(UpdateRequestDTO):
    """
    DTO for updating an invoice.
    A zero amount or an empty description keeps the current value.
    """

    id: Optional[int] = Field(default=None, description="Invoice ID, taken from the path")
    amount: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=10, decimal_places=2, description="New amount"
    )
    status: Optional[InvoiceStatus] = Field(default=None, description="New status")
    issue_date: Optional[date] = Field(default=None, description="New issue date")
    due_date: Optional[date] = Field(default=None, description="New due date")
    description: Optional[str] = Field(default=None, description="New description")

    def to_patch(self) -> InvoicePatch:
        return InvoicePatch(
            amount=self.amount,
            status=InvoiceStatus(self.status) if self.status else None,
            issue_date=self.issue_date,
            due_date=self.due_date,
            description=self.description
        )


class ChangeInvoiceStatusRequestDTO(RequestDTO):
    """DTO for moving an invoice along the status graph."""

    id: Optional[int] = Field(default=None, description="Invoice ID, taken from the path")
    status: InvoiceStatus = Field(description="Target status")


class ListInvoicesRequestDTO(ListRequestDTO):
    """DTO for listing invoices."""

    client_id: Optional[int] = Field(default=None, description="Filter by client")
    status: Optional[InvoiceStatus] = Field(default=None, description="Filter by status")
    overdue: bool = Field(default=False, description="Only invoices that are late today")


class InvoiceResponseDTO(ResponseDTO):
    """DTO for invoice responses."""

    number: str
    client_id: int
    amount: Decimal
    status: InvoiceStatus
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    description: Optional[str] = None
    is_overdue: bool = False
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, invoice: Invoice, is_overdue: bool = False) -> "InvoiceResponseDTO":
        """Create DTO from domain entity."""
        return cls(
            id=invoice.id,
            number=invoice.number,
            client_id=invoice.client_id,
            amount=invoice.amount,
            status=invoice.status,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            description=invoice.description,
            is_overdue=is_overdue,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
            deleted_at=invoice.deleted_at
        )


class InvoiceListResponseDTO(BaseDTO):
    """Paginated invoice list."""

    invoices: List[InvoiceResponseDTO]
    pagination: PaginationDTO


class FlagOverdueResponseDTO(BaseDTO):
    """Result of an overdue flagging run."""

    as_of: date
    flagged: int
    invoices: List[InvoiceResponseDTO]
