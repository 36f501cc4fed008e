"""
Invoice management router.
Handles invoice CRUD, status changes and overdue flagging.
"""

from datetime import date
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query

from crudhub.config import Settings
from crudhub.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    UpdateInvoiceUseCase,
    ChangeInvoiceStatusUseCase,
    GetInvoiceUseCase,
    ListInvoicesUseCase,
    DeleteInvoiceUseCase,
    FlagOverdueInvoicesUseCase
)
from crudhub.application.dto.base_dto import MessageResponseDTO
from crudhub.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    ChangeInvoiceStatusRequestDTO,
    ListInvoicesRequestDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
    FlagOverdueResponseDTO
)
from crudhub.domain.models.invoice import InvoiceStatus
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.domain.services.numbering_service import NumberingService
from crudhub.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from crudhub.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from crudhub.infrastructure.web.dependencies import (
    get_app_settings,
    get_client_repository,
    get_invoice_repository,
    get_lifecycle_service,
    get_numbering_service
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    request: CreateInvoiceRequestDTO,
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    client_repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)],
    numbering_service: Annotated[NumberingService, Depends(get_numbering_service)],
    settings: Annotated[Settings, Depends(get_app_settings)]
):
    """
    Create a new invoice for a live client. The number is generated.

    - **client_id**: Owning client (required)
    - **amount**: Amount, greater than 0 (required)
    - **status**: Initial status, draft by default
    - **issue_date**: Issue date, today by default
    - **due_date**: Due date, not before the issue date
    - **description**: Up to 500 characters
    """
    use_case = CreateInvoiceUseCase(
        repository,
        client_repository,
        lifecycle_service,
        numbering_service,
        max_retries=settings.invoice_number_max_retries
    )
    return await use_case.execute(request)


@router.get("", response_model=InvoiceListResponseDTO)
async def list_invoices(
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    client_id: Optional[int] = Query(None, description="Filter by client"),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter by status"),
    overdue: bool = Query(False, description="Only invoices that are late today")
):
    """
    List live invoices with pagination and filters.

    - **page**: Page number (1-based)
    - **limit**: Number of invoices per page (default 10)
    - **client_id**: Filter by client
    - **status**: Filter by status (draft, sent, paid, overdue, cancelled)
    - **overdue**: Only sent or overdue invoices past their due date
    """
    use_case = ListInvoicesUseCase(repository, lifecycle_service, settings.default_page_size, settings.max_page_size)
    return await use_case.execute(ListInvoicesRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        client_id=client_id,
        status=invoice_status,
        overdue=overdue
    ))


@router.post("/flag-overdue", response_model=FlagOverdueResponseDTO)
async def flag_overdue_invoices(
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)],
    as_of: Optional[date] = Query(None, description="Reference day, today by default")
):
    """
    Move every live sent invoice past its due date to overdue.
    """
    use_case = FlagOverdueInvoicesUseCase(repository, lifecycle_service)
    return await use_case.execute(as_of)


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(
    invoice_id: int,
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """Get a live invoice by ID."""
    use_case = GetInvoiceUseCase(repository, lifecycle_service)
    return await use_case.execute(invoice_id)


@router.put("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestDTO,
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Update an invoice. The number and the client never change.

    - **amount**: New amount; 0 or missing keeps the current one
    - **status**: New status, must be reachable from the current one
    - **issue_date** / **due_date**: New dates, checked together
    - **description**: New description; empty keeps the current one
    """
    request.id = invoice_id
    use_case = UpdateInvoiceUseCase(repository, lifecycle_service)
    return await use_case.execute(request)


@router.post("/{invoice_id}/status", response_model=InvoiceResponseDTO)
async def change_invoice_status(
    invoice_id: int,
    request: ChangeInvoiceStatusRequestDTO,
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Move an invoice to a new status.

    - **status**: Target status; illegal transitions are rejected with 409
    """
    request.id = invoice_id
    use_case = ChangeInvoiceStatusUseCase(repository, lifecycle_service)
    return await use_case.execute(request)


@router.delete("/{invoice_id}", response_model=MessageResponseDTO)
async def delete_invoice(
    invoice_id: int,
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    lifecycle_service: Annotated[InvoiceLifecycleService, Depends(get_lifecycle_service)]
):
    """
    Soft-delete an invoice. Paid invoices are rejected with 409.
    """
    use_case = DeleteInvoiceUseCase(repository, lifecycle_service)
    await use_case.execute(invoice_id)
    return MessageResponseDTO(message="Invoice deleted successfully")
