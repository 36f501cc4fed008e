"""
Invoice domain model.
Represents a billed amount owed by a client, with its status and dates.
"""

from dataclasses import dataclass, replace
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, Dict, FrozenSet, Iterable
from enum import Enum

from crudhub.domain.models.base import (
    BaseEntity,
    ValueObject,
    ValidationError,
    DomainEvent
)


DESCRIPTION_MAX_LENGTH = 500
INVOICE_NUMBER_PREFIX = "INV"


class InvoiceStatus(str, Enum):
    """Invoice status."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "InvoiceStatus":
        """Parse a status, rejecting anything outside the five variants."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(status.value for status in cls)
            raise ValidationError(
                f"Invalid invoice status '{value}' (expected one of: {valid})",
                "status"
            )

    @property
    def is_terminal(self) -> bool:
        """Paid and cancelled invoices accept no further transitions."""
        return not ALLOWED_TRANSITIONS[self]


# No self-edges: a "transition" to the current status is rejected like any
# other unlisted edge.
ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({
        InvoiceStatus.PAID,
        InvoiceStatus.OVERDUE,
        InvoiceStatus.CANCELLED
    }),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}

# Statuses for which lateness is meaningful
OVERDUE_ELIGIBLE_STATUSES: FrozenSet[InvoiceStatus] = frozenset({
    InvoiceStatus.SENT,
    InvoiceStatus.OVERDUE
})


# Domain Events

class InvoiceCreatedEvent(DomainEvent):
    """Event raised when an invoice is created."""

    def __init__(self, invoice_id: Optional[int], number: str, client_id: int, amount: Decimal):
        super().__init__()
        self.invoice_id = invoice_id
        self.number = number
        self.client_id = client_id
        self.amount = str(amount)

    @property
    def event_name(self) -> str:
        return "invoice.created"


class InvoiceStatusChangedEvent(DomainEvent):
    """Event raised when an invoice moves along the status graph."""

    def __init__(self, invoice_id: Optional[int], from_status: InvoiceStatus, to_status: InvoiceStatus):
        super().__init__()
        self.invoice_id = invoice_id
        self.from_status = from_status.value
        self.to_status = to_status.value

    @property
    def event_name(self) -> str:
        return "invoice.status_changed"


class InvoiceDeletedEvent(DomainEvent):
    """Event raised when an invoice is soft-deleted."""

    def __init__(self, invoice_id: Optional[int], number: Optional[str]):
        super().__init__()
        self.invoice_id = invoice_id
        self.number = number

    @property
    def event_name(self) -> str:
        return "invoice.deleted"


@dataclass(frozen=True)
class InvoiceNumber(ValueObject):
    """Invoice number of the form INV-YYYYMMDD-N."""

    issue_date: date
    sequence: int
    prefix: str = INVOICE_NUMBER_PREFIX

    def validate(self) -> None:
        """Validate invoice number parts."""
        if self.sequence <= 0:
            raise ValidationError("Invoice sequence must be positive", "number")

        if not self.prefix:
            raise ValidationError("Invoice number prefix is required", "number")

    def __str__(self) -> str:
        return f"{self.day_prefix(self.issue_date, self.prefix)}{self.sequence}"

    @staticmethod
    def day_prefix(issue_date: date, prefix: str = INVOICE_NUMBER_PREFIX) -> str:
        """Leading part shared by every number issued for a day, e.g. INV-20240115-."""
        return f"{prefix}-{issue_date:%Y%m%d}-"

    @staticmethod
    def last_sequence(numbers: Iterable[str], day_prefix: str) -> int:
        """Highest sequence among the numbers under day_prefix, 0 when there is none."""
        suffixes = (number[len(day_prefix):] for number in numbers if number and number.startswith(day_prefix))
        return max((int(suffix) for suffix in suffixes if suffix.isdigit()), default=0)

    @classmethod
    def from_string(cls, value: str) -> "InvoiceNumber":
        """Parse an invoice number from its string form."""
        parts = value.split("-") if value else []
        if len(parts) != 3 or not parts[2].isdigit():
            raise ValidationError(f"Invalid invoice number format: {value}", "number")

        try:
            issue_date = datetime.strptime(parts[1], "%Y%m%d").date()
        except ValueError:
            raise ValidationError(f"Invalid invoice number date: {value}", "number")

        return cls(issue_date=issue_date, sequence=int(parts[2]), prefix=parts[0])


@dataclass(frozen=True)
class InvoicePatch:
    """
    Partial update for an invoice.
    None means "not supplied". An amount of zero or less and an empty
    description also mean "no change"; the number and client are never patchable.
    """

    amount: Optional[Decimal] = None
    status: Optional[InvoiceStatus] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    description: Optional[str] = None

    @property
    def has_amount(self) -> bool:
        return self.amount is not None and self.amount > 0

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def has_dates(self) -> bool:
        return self.issue_date is not None or self.due_date is not None


@dataclass
class Invoice(BaseEntity):
    """
    Invoice entity.
    The number is assigned once on creation and never changes afterwards.
    """

    number: Optional[str] = None
    client_id: int = 0
    amount: Decimal = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    description: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.amount, Decimal):
            self.amount = Decimal(str(self.amount))
        if self.status is None:
            self.status = InvoiceStatus.DRAFT
        elif not isinstance(self.status, InvoiceStatus):
            self.status = InvoiceStatus.parse(self.status)

    @property
    def is_draft(self) -> bool:
        return self.status == InvoiceStatus.DRAFT

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    def days_until_due(self, as_of: date) -> Optional[int]:
        """Days left until the due date (negative once it has passed)."""
        if self.due_date is None:
            return None
        return (self.due_date - as_of).days

    def assign_number(self, number: str) -> "Invoice":
        """Return a copy carrying the generated number."""
        if self.number is not None:
            raise ValidationError("Invoice number cannot be changed once assigned", "number")
        numbered = replace(self, number=number)
        numbered.add_event(
            InvoiceCreatedEvent(self.id, number, self.client_id, self.amount)
        )
        return numbered

    def mark_deleted(self, at: Optional[datetime] = None) -> None:
        """Soft-delete the invoice."""
        self.deleted_at = at or datetime.utcnow()
        self.add_event(InvoiceDeletedEvent(self.id, self.number))
