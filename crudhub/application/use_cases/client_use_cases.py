"""
Client use cases for the application layer.
Implements business logic for client management operations.
"""

import logging
from datetime import date
from typing import Callable

from crudhub.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, GetByIdUseCase, ListUseCase
)
from crudhub.application.dto.base_dto import PaginationDTO
from crudhub.application.dto.client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    ListClientsRequestDTO,
    ClientResponseDTO,
    ClientDetailResponseDTO,
    ClientListResponseDTO
)
from crudhub.application.dto.invoice_dto import InvoiceResponseDTO
from crudhub.domain.models.base import EntityNotFoundError, DuplicateEntityError
from crudhub.domain.models.client import Client
from crudhub.domain.repositories.client_repository import ClientRepository
from crudhub.domain.repositories.invoice_repository import InvoiceRepository
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService


logger = logging.getLogger(__name__)


class CreateClientUseCase(CreateUseCase[CreateClientRequestDTO, ClientResponseDTO]):
    """Use case for creating a new client."""

    def __init__(self, client_repository: ClientRepository):
        super().__init__()
        self.client_repository = client_repository

    async def _execute_command_logic(self, request: CreateClientRequestDTO) -> ClientResponseDTO:
        client = Client.create(
            name=request.name,
            email=request.email,
            phone=request.phone,
            address=request.address
        )

        if await self.client_repository.find_by_email(client.email):
            raise DuplicateEntityError("Client", "email", client.email)

        saved_client = await self.client_repository.add(client)
        self._collect_events(saved_client)

        logger.info("Client created", extra={"client_id": saved_client.id})
        return ClientResponseDTO.from_domain(saved_client)


class UpdateClientUseCase(UpdateUseCase[UpdateClientRequestDTO, ClientResponseDTO]):
    """
    Use case for updating a client.
    Only non-empty fields overwrite; a field can never be cleared.
    """

    def __init__(
        self,
        client_repository: ClientRepository,
        lifecycle_service: InvoiceLifecycleService
    ):
        super().__init__()
        self.client_repository = client_repository
        self.lifecycle_service = lifecycle_service

    async def _execute_command_logic(self, request: UpdateClientRequestDTO) -> ClientResponseDTO:
        client = await self.client_repository.find_by_id(request.id)
        if not client:
            raise EntityNotFoundError("Client", request.id)

        updated = self.lifecycle_service.apply_client_patch(client, request.to_patch())
        updated.validate()

        if updated.email != client.email:
            existing = await self.client_repository.find_by_email(updated.email)
            if existing and existing.id != client.id:
                raise DuplicateEntityError("Client", "email", updated.email)

        saved_client = await self.client_repository.update(updated)
        self._collect_events(saved_client)

        return ClientResponseDTO.from_domain(saved_client)


class GetClientUseCase(GetByIdUseCase[int, ClientDetailResponseDTO]):
    """Use case for getting a client with its live invoices."""

    def __init__(
        self,
        client_repository: ClientRepository,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.client_repository = client_repository
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_business_logic(self, client_id: int) -> ClientDetailResponseDTO:
        client = await self.client_repository.find_by_id(client_id)
        if not client:
            raise EntityNotFoundError("Client", client_id)

        as_of = self.today()
        invoices = await self.invoice_repository.list(client_id=client_id, limit=None)

        return ClientDetailResponseDTO(
            **ClientResponseDTO.from_domain(client).model_dump(),
            invoices=[
                InvoiceResponseDTO.from_domain(invoice, self.lifecycle_service.is_overdue(invoice, as_of))
                for invoice in invoices
            ]
        )


class ListClientsUseCase(ListUseCase[ListClientsRequestDTO, ClientListResponseDTO]):
    """Use case for listing clients with search and pagination."""

    def __init__(self, client_repository: ClientRepository, default_page_size: int = 10, max_page_size: int = 100):
        super().__init__(default_page_size, max_page_size)
        self.client_repository = client_repository

    async def _execute_business_logic(self, request: ListClientsRequestDTO) -> ClientListResponseDTO:
        page, limit, offset = self._page_window(request)

        clients = await self.client_repository.list(
            offset=offset,
            limit=limit,
            search=request.search,
            include_deleted=request.include_deleted
        )
        total = await self.client_repository.count(
            search=request.search,
            include_deleted=request.include_deleted
        )

        return ClientListResponseDTO(
            clients=[ClientResponseDTO.from_domain(client) for client in clients],
            pagination=PaginationDTO(page=page, limit=limit, total=total)
        )


class DeleteClientUseCase(DeleteUseCase[int, None]):
    """
    Use case for soft-deleting a client.
    Blocked while the client has live invoices. The client row stays locked
    from the count to the delete, so no invoice can slip in between.
    """

    def __init__(
        self,
        client_repository: ClientRepository,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService
    ):
        super().__init__()
        self.client_repository = client_repository
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service

    async def _execute_command_logic(self, client_id: int) -> None:
        client = await self.client_repository.find_by_id_for_update(client_id)
        if not client:
            raise EntityNotFoundError("Client", client_id)

        live_invoice_count = await self.invoice_repository.count_live_invoices_for_client(client_id)
        self.lifecycle_service.ensure_client_deletable(client_id, live_invoice_count)

        await self.client_repository.soft_delete(client)
        self._collect_events(client)

        logger.info("Client deleted", extra={"client_id": client_id})
