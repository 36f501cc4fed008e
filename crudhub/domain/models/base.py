"""
Shared building blocks of the domain layer: entities with soft-delete state,
domain events, the error hierarchy and value objects.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Any, Dict, List
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import uuid


class DomainEvent(ABC):
    """Something that happened to an entity, published after the command commits."""

    def __init__(self):
        self.event_id = str(uuid.uuid4())
        self.occurred_at = datetime.utcnow()

    @property
    @abstractmethod
    def event_name(self) -> str:
        """Dotted event name, e.g. ``invoice.created``."""

    def payload(self) -> Dict[str, Any]:
        return {
            key: _plain(value) for key, value in vars(self).items()
            if key not in ("event_id", "occurred_at")
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_name": self.event_name,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self.payload()
        }


def _plain(value: Any) -> Any:
    """Reduce enums, dates and decimals to JSON-friendly values."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return getattr(value, "value", value)


@dataclass
class BaseEntity(ABC):
    """
    Identity, audit timestamps and the soft-delete marker.
    A row with deleted_at set is invisible to every query and guard.
    """

    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    _events: List[DomainEvent] = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        self.updated_at = self.updated_at or self.created_at

    def add_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def pull_events(self) -> List[DomainEvent]:
        """Return the pending events and forget them."""
        pending = list(self._events)
        self._events.clear()
        return pending

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def validate(self) -> None:
        """Raise ValidationError when a static rule is broken. No-op by default."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: _plain(value) for key, value in vars(self).items()
            if not key.startswith("_")
        }



class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    @property
    def details(self) -> Dict[str, Any]:
        """Structured diagnostics for the error response."""
        return {}


class ValidationError(DomainException):
    """Exception raised when input fails a static rule."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field

    @property
    def details(self) -> Dict[str, Any]:
        return {"field": self.field} if self.field else {}


class TransitionError(DomainException):
    """Exception raised when a status change is not a legal edge."""

    def __init__(self, from_status: Any, to_status: Any):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        message = f"Cannot change invoice status from '{from_value}' to '{to_value}'"
        super().__init__(message, "INVALID_STATUS_TRANSITION")
        self.from_status = from_status
        self.to_status = to_status

    @property
    def details(self) -> Dict[str, Any]:
        return {
            "from_status": getattr(self.from_status, "value", self.from_status),
            "to_status": getattr(self.to_status, "value", self.to_status)
        }


class ReferentialGuardError(DomainException):
    """Exception raised when a delete is blocked by a dependency or by state."""

    def __init__(
        self,
        message: str,
        entity_type: str,
        entity_id: Any = None,
        blocking_count: Optional[int] = None,
        count_label: str = "count"
    ):
        super().__init__(message, "REFERENTIAL_GUARD")
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.blocking_count = blocking_count
        self.count_label = count_label

    @property
    def details(self) -> Dict[str, Any]:
        if self.blocking_count is None:
            return {}
        return {self.count_label: self.blocking_count}


class EntityNotFoundError(DomainException):
    """Exception raised when an entity does not exist or is soft-deleted."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityError(DomainException):
    """Exception raised when trying to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any):
        message = f"{entity_type} with {field}='{value}' already exists"
        super().__init__(message, "DUPLICATE_ENTITY")
        self.entity_type = entity_type
        self.field = field
        self.value = value

    @property
    def details(self) -> Dict[str, Any]:
        return {"field": self.field}


class ConcurrencyConflictError(DomainException):
    """
    Exception raised when a storage-level constraint caught a concurrent write.
    The whole read-decide-write sequence should be retried with a fresh read.
    """

    retryable = True

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message, "CONCURRENCY_CONFLICT")
        self.constraint = constraint

    @property
    def details(self) -> Dict[str, Any]:
        return {"retryable": self.retryable}


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable value compared by content. Checked on construction."""

    def __post_init__(self):
        self.validate()

    @abstractmethod
    def validate(self) -> None:
        """Raise ValidationError for an invalid value."""


EMAIL_MAX_LENGTH = 255


@dataclass(frozen=True)
class Email(ValueObject):
    """
    Contact email. Only a presence and shape check: an ``@`` and a dot.
    Deliverability is never verified.
    """

    value: str

    def validate(self) -> None:
        if not self.value:
            raise ValidationError("Email is required", "email")

        if len(self.value) > EMAIL_MAX_LENGTH:
            raise ValidationError(f"Email too long (max {EMAIL_MAX_LENGTH} characters)", "email")

        if "@" not in self.value or "." not in self.value:
            raise ValidationError(f"Invalid email format: {self.value}", "email")

    def __str__(self) -> str:
        return self.value
