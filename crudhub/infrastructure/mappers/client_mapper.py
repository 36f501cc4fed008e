"""
Client mapper for converting between domain entities and database models.
"""

from crudhub.domain.models.client import Client
from crudhub.infrastructure.db.models import ClientModel


class ClientMapper:
    """Maps between Client domain entity and ClientModel database model."""

    def domain_to_model(self, client: Client) -> ClientModel:
        """Convert Client domain entity to ClientModel."""
        return ClientModel(
            id=client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            created_at=client.created_at,
            updated_at=client.updated_at,
            deleted_at=client.deleted_at
        )

    def model_to_domain(self, model: ClientModel) -> Client:
        """Convert ClientModel to Client domain entity."""
        return Client(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            address=model.address,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at
        )

    def update_model(self, model: ClientModel, client: Client) -> None:
        """Copy mutable client fields onto an existing model."""
        model.name = client.name
        model.email = client.email
        model.phone = client.phone
        model.address = client.address
        model.updated_at = client.updated_at
        model.deleted_at = client.deleted_at
