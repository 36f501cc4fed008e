"""
Client management router.
Handles CRUD operations for client resources.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query

from crudhub.config import Settings
from crudhub.application.use_cases.client_use_cases import (
    CreateClientUseCase,
    UpdateClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    DeleteClientUseCase
)
from crudhub.application.use_cases.invoice_use_cases import ListClientInvoicesUseCase
from crudhub.application.dto.base_dto import MessageResponseDTO
from crudhub.application.dto.client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    ListClientsRequestDTO,
    ClientResponseDTO,
    ClientDetailResponseDTO,
    ClientListResponseDTO
)
from crudhub.application.dto.invoice_dto import ListInvoicesRequestDTO, InvoiceListResponseDTO
from crudhub.domain.models.invoice import InvoiceStatus
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from crudhub.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from crudhub.infrastructure.web.dependencies import (
    get_app_settings,
    get_client_repository,
    get_invoice_repository,
    get_lifecycle_service
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ClientResponseDTO)
async def create_client(
    request: CreateClientRequestDTO,
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """
    Create a new client.

    - **name**: Client name (required)
    - **email**: Contact email, unique among clients (required)
    - **phone**: Phone number
    - **address**: Postal address
    """
    use_case = CreateClientUseCase(repository)
    return await use_case.execute(request)


@router.get("", response_model=ClientListResponseDTO)
async def list_clients(
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    search: Optional[str] = Query(None, description="Search clients by name or email"),
    include_deleted: bool = Query(False, description="Include soft-deleted clients")
):
    """
    List clients with pagination and search.

    - **page**: Page number (1-based)
    - **limit**: Number of clients per page (default 10)
    - **search**: Case-insensitive match on name or email
    - **include_deleted**: Include soft-deleted clients
    """
    use_case = ListClientsUseCase(repository, settings.default_page_size, settings.max_page_size)
    return await use_case.execute(ListClientsRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        search=search,
        include_deleted=include_deleted
    ))


@router.get("/{client_id}", response_model=ClientDetailResponseDTO)
async def get_client(
    client_id: int,
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    invoice_repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Get a live client together with its live invoices.
    """
    use_case = GetClientUseCase(repository, invoice_repository, lifecycle_service)
    return await use_case.execute(client_id)


@router.put("/{client_id}", response_model=ClientResponseDTO)
async def update_client(
    client_id: int,
    request: UpdateClientRequestDTO,
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Update a client. Empty or missing fields keep their current value.

    - **name**: New name
    - **email**: New email, unique among clients
    - **phone**: New phone number
    - **address**: New address
    """
    request.id = client_id
    use_case = UpdateClientUseCase(repository, lifecycle_service)
    return await use_case.execute(request)


@router.delete("/{client_id}", response_model=MessageResponseDTO)
async def delete_client(
    client_id: int,
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    invoice_repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Soft-delete a client.
    Rejected with 409 while the client still has live invoices.
    """
    use_case = DeleteClientUseCase(repository, invoice_repository, lifecycle_service)
    await use_case.execute(client_id)
    return MessageResponseDTO(message="Client deleted successfully")


@router.get("/{client_id}/invoices", response_model=InvoiceListResponseDTO)
async def list_client_invoices(
    client_id: int,
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    invoice_repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter by status"),
    overdue: bool = Query(False, description="Only invoices that are late today")
):
    """
    List the live invoices of a live client.
    """
    use_case = ListClientInvoicesUseCase(
        invoice_repository,
        repository,
        lifecycle_service,
        settings.default_page_size,
        settings.max_page_size
    )
    return await use_case.execute(ListInvoicesRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        client_id=client_id,
        status=invoice_status,
        overdue=overdue
    ))
