"""
Client repository implementation using SQLAlchemy.
"""

from typing import Optional, List

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudhub.domain.models.client import Client
from crudhub.domain.repositories.client_repository import ClientRepository as ClientRepositoryInterface
from crudhub.domain.models.base import EntityNotFoundError, DuplicateEntityError
from crudhub.infrastructure.db.models import ClientModel
from crudhub.infrastructure.mappers.client_mapper import ClientMapper
from crudhub.infrastructure.repositories.base import SQLAlchemyRepository


class SQLAlchemyClientRepository(SQLAlchemyRepository, ClientRepositoryInterface):
    """SQLAlchemy implementation of client repository."""

    model = ClientModel

    def __init__(self, session: Session):
        super().__init__(session)
        self.mapper = ClientMapper()

    async def add(self, client: Client) -> Client:
        """Insert a new client."""
        existing = await self.find_by_email(client.email)
        if existing:
            raise DuplicateEntityError("Client", "email", client.email)

        model = self.mapper.domain_to_model(client)
        self._write(client, model)

        client.id = model.id
        return client

    async def update(self, client: Client) -> Client:
        """Persist client changes."""
        model = self._get_model(client.id, include_deleted=True)
        if not model:
            raise EntityNotFoundError("Client", client.id)

        client.updated_at = self._now()
        self.mapper.update_model(model, client)
        self._write(client)
        return client

    async def find_by_id(self, client_id: int, include_deleted: bool = False) -> Optional[Client]:
        """Get client by ID."""
        model = self._get_model(client_id, include_deleted)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_id_for_update(self, client_id: int) -> Optional[Client]:
        """Get a live client and lock its row."""
        model = self._query().filter(ClientModel.id == client_id).with_for_update().first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_email(self, email: str) -> Optional[Client]:
        """Get live client by email."""
        model = self._query().filter(ClientModel.email == email).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        include_deleted: bool = False
    ) -> List[Client]:
        """Get clients with optional search and pagination."""
        query = self._filtered(search, include_deleted).order_by(ClientModel.id)
        models = query.offset(offset).limit(limit).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def count(self, search: Optional[str] = None, include_deleted: bool = False) -> int:
        """Get client count."""
        query = self._filtered(search, include_deleted)
        return query.with_entities(func.count(ClientModel.id)).scalar() or 0

    async def soft_delete(self, client: Client) -> None:
        """Soft-delete a client."""
        model = self._get_model(client.id)
        if not model:
            raise EntityNotFoundError("Client", client.id)

        if client.deleted_at is None:
            client.mark_deleted(self._now())
        client.updated_at = client.deleted_at
        self.mapper.update_model(model, client)
        self._write(client)

    def _filtered(self, search: Optional[str], include_deleted: bool):
        query = self._query(include_deleted)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                ClientModel.name.ilike(pattern),
                ClientModel.email.ilike(pattern)
            ))
        return query

    def _translate_integrity_error(self, exc: IntegrityError, client: Client) -> Optional[Exception]:
        if self._violates(exc, "uq_clients_email", "clients.email"):
            return DuplicateEntityError("Client", "email", client.email)
        return None
