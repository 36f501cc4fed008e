"""
Client DTOs for the application layer.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import Field

from crudhub.domain.models.client import Client, ClientPatch
from .base_dto import (
    ResponseDTO, CreateRequestDTO, UpdateRequestDTO, ListRequestDTO, PaginationDTO, BaseDTO
)
from .invoice_dto import InvoiceResponseDTO


class CreateClientRequestDTO(CreateRequestDTO):
    """DTO for creating a new client."""

    name: str = Field(description="Client name")
    email: str = Field(description="Contact email, unique among clients")
    phone: Optional[str] = Field(default=None, description="Phone number")
    address: Optional[str] = Field(default=None, description="Postal address")


class UpdateClientRequestDTO(UpdateRequestDTO):
    """
    DTO for updating an existing client.
    Omitted or empty fields keep their current value.
    """

    id: Optional[int] = Field(default=None, description="Client ID, taken from the path")
    name: Optional[str] = Field(default=None, description="Client name")
    email: Optional[str] = Field(default=None, description="Contact email")
    phone: Optional[str] = Field(default=None, description="Phone number")
    address: Optional[str] = Field(default=None, description="Postal address")

    def to_patch(self) -> ClientPatch:
        return ClientPatch(
            name=self.name,
            email=self.email,
            phone=self.phone,
            address=self.address
        )


class ListClientsRequestDTO(ListRequestDTO):
    """DTO for listing clients."""

    search: Optional[str] = Field(default=None, max_length=255, description="Search by name or email")
    include_deleted: bool = Field(default=False, description="Include soft-deleted clients")


class ClientResponseDTO(ResponseDTO):
    """DTO for client responses."""

    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, client: Client) -> "ClientResponseDTO":
        """Create DTO from domain entity."""
        return cls(
            id=client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            created_at=client.created_at,
            updated_at=client.updated_at,
            deleted_at=client.deleted_at
        )


class ClientDetailResponseDTO(ClientResponseDTO):
    """Client with its live invoices."""

    invoices: List[InvoiceResponseDTO] = Field(default_factory=list)


class ClientListResponseDTO(BaseDTO):
    """Paginated client list."""

    clients: List[ClientResponseDTO]
    pagination: PaginationDTO
