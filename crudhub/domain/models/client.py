"""
Client domain model.
Represents a billed customer that owns invoices.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from crudhub.domain.models.base import (
    BaseEntity,
    Email,
    ValidationError,
    DomainEvent
)


NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
ADDRESS_MAX_LENGTH = 255


# Domain Events

class ClientCreatedEvent(DomainEvent):
    """Event raised when a new client is created."""

    def __init__(self, client_id: Optional[int], name: str, email: str):
        super().__init__()
        self.client_id = client_id
        self.name = name
        self.email = email

    @property
    def event_name(self) -> str:
        return "client.created"


class ClientUpdatedEvent(DomainEvent):
    """Event raised when client information is updated."""

    def __init__(self, client_id: Optional[int], changes: dict):
        super().__init__()
        self.client_id = client_id
        self.changes = changes

    @property
    def event_name(self) -> str:
        return "client.updated"


class ClientDeletedEvent(DomainEvent):
    """Event raised when a client is soft-deleted."""

    def __init__(self, client_id: Optional[int]):
        super().__init__()
        self.client_id = client_id

    @property
    def event_name(self) -> str:
        return "client.deleted"


@dataclass(frozen=True)
class ClientPatch:
    """
    Partial update for a client.
    None means "not supplied". An empty string is treated the same way, so a
    patch can never clear a field.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    def supplied_fields(self) -> dict:
        """Return the fields that would overwrite the existing value."""
        return {
            key: value for key, value in (
                ("name", self.name),
                ("email", self.email),
                ("phone", self.phone),
                ("address", self.address),
            )
            if value
        }


@dataclass
class Client(BaseEntity):
    """
    Client entity.
    Soft-deleted only, and never while live invoices reference it.
    """

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: Optional[str] = None

    def validate(self) -> None:
        """Validate client state."""
        if not self.name or not self.name.strip():
            raise ValidationError("Client name is required", "name")

        if len(self.name) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"Client name too long (max {NAME_MAX_LENGTH} characters)", "name"
            )

        Email(self.email)

        if self.phone and len(self.phone) > PHONE_MAX_LENGTH:
            raise ValidationError(
                f"Phone number too long (max {PHONE_MAX_LENGTH} characters)", "phone"
            )

        if self.address and len(self.address) > ADDRESS_MAX_LENGTH:
            raise ValidationError(
                f"Address too long (max {ADDRESS_MAX_LENGTH} characters)", "address"
            )

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        phone: Optional[str] = None,
        address: Optional[str] = None
    ) -> "Client":
        """Create and validate a new client."""
        client = cls(
            name=name,
            email=email,
            phone=phone or None,
            address=address or None
        )
        client.validate()
        client.add_event(ClientCreatedEvent(client.id, client.name, client.email))
        return client

    def with_patch(self, patch: ClientPatch) -> "Client":
        """
        Return a copy with every non-empty patch field applied.
        The receiver is left untouched.
        """
        changes = {
            key: value for key, value in patch.supplied_fields().items()
            if getattr(self, key) != value
        }
        if not changes:
            return replace(self)

        updated = replace(self, **changes)
        updated.add_event(ClientUpdatedEvent(self.id, changes))
        return updated

    def mark_deleted(self, at: Optional[datetime] = None) -> None:
        """Soft-delete the client."""
        self.deleted_at = at or datetime.utcnow()
        self.add_event(ClientDeletedEvent(self.id))

    def __str__(self) -> str:
        return f"Client(id={self.id}, name={self.name}, email={self.email})"
