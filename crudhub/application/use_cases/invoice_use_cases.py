"""
Invoice use cases for the application layer.
Implements business logic for invoicing operations.
"""

import logging
from datetime import date
from typing import Callable, Optional

from crudhub.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, GetByIdUseCase, ListUseCase
)
from crudhub.application.dto.base_dto import PaginationDTO
from crudhub.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    ChangeInvoiceStatusRequestDTO,
    ListInvoicesRequestDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
    FlagOverdueResponseDTO
)
from crudhub.domain.models.base import EntityNotFoundError, ConcurrencyConflictError
from crudhub.domain.models.invoice import Invoice, InvoiceStatus
from crudhub.domain.repositories.client_repository import ClientRepository
from crudhub.domain.repositories.invoice_repository import InvoiceRepository
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.domain.services.numbering_service import NumberingService


logger = logging.getLogger(__name__)


class _InvoiceResponseMixin:
    """Builds invoice responses carrying the computed lateness flag."""

    lifecycle_service: InvoiceLifecycleService
    today: Callable[[], date]

    def _to_response(self, invoice: Invoice, as_of: Optional[date] = None) -> InvoiceResponseDTO:
        as_of = as_of or self.today()
        return InvoiceResponseDTO.from_domain(invoice, self.lifecycle_service.is_overdue(invoice, as_of))


class CreateInvoiceUseCase(_InvoiceResponseMixin, CreateUseCase[CreateInvoiceRequestDTO, InvoiceResponseDTO]):
    """
    Use case for creating a new invoice.

    The number comes from the count of invoices issued the same day. Two
    concurrent requests can read the same count; the unique constraint on
    the number rejects the loser, which recounts and tries again.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        client_repository: ClientRepository,
        lifecycle_service: InvoiceLifecycleService,
        numbering_service: NumberingService,
        max_retries: int = 3,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.client_repository = client_repository
        self.lifecycle_service = lifecycle_service
        self.numbering_service = numbering_service
        self.max_retries = max(max_retries, 1)
        self.today = today

    async def _execute_command_logic(self, request: CreateInvoiceRequestDTO) -> InvoiceResponseDTO:
        invoice = Invoice(
            client_id=request.client_id,
            amount=request.amount,
            status=InvoiceStatus(request.status) if request.status else InvoiceStatus.DRAFT,
            issue_date=request.issue_date or self.today(),
            due_date=request.due_date,
            description=request.description
        )
        self.lifecycle_service.validate_for_create(invoice)

        # Locks the client row so a concurrent delete waits for this insert
        client = await self.client_repository.find_by_id_for_update(invoice.client_id)
        if not client:
            raise EntityNotFoundError("Client", invoice.client_id)

        saved_invoice = await self._insert_with_number(invoice)
        self._collect_events(saved_invoice)

        logger.info(
            "Invoice created",
            extra={"invoice_id": saved_invoice.id, "number": saved_invoice.number, "client_id": client.id}
        )
        return self._to_response(saved_invoice)

    async def _insert_with_number(self, invoice: Invoice) -> Invoice:
        for attempt in range(1, self.max_retries + 1):
            same_day_count = await self.invoice_repository.count_invoices_issued_on(
                invoice.issue_date, self.numbering_service.prefix
            )
            number = self.numbering_service.generate_invoice_number(invoice.issue_date, same_day_count)

            try:
                return await self.invoice_repository.add(invoice.assign_number(number))
            except ConcurrencyConflictError:
                if attempt == self.max_retries:
                    raise
                logger.warning(
                    "Invoice number %s already taken, retrying (attempt %d of %d)",
                    number, attempt, self.max_retries
                )


class UpdateInvoiceUseCase(_InvoiceResponseMixin, UpdateUseCase[UpdateInvoiceRequestDTO, InvoiceResponseDTO]):
    """
    Use case for updating an invoice.
    Only supplied fields change; a supplied status must be a legal transition.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_command_logic(self, request: UpdateInvoiceRequestDTO) -> InvoiceResponseDTO:
        invoice = await self.invoice_repository.find_by_id(request.id)
        if not invoice:
            raise EntityNotFoundError("Invoice", request.id)

        updated = self.lifecycle_service.apply_update(invoice, request.to_patch())

        saved_invoice = await self.invoice_repository.update(updated)
        self._collect_events(saved_invoice)

        return self._to_response(saved_invoice)


class ChangeInvoiceStatusUseCase(
    _InvoiceResponseMixin, UpdateUseCase[ChangeInvoiceStatusRequestDTO, InvoiceResponseDTO]
):
    """Use case for moving an invoice along the status graph."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_command_logic(self, request: ChangeInvoiceStatusRequestDTO) -> InvoiceResponseDTO:
        invoice = await self.invoice_repository.find_by_id(request.id)
        if not invoice:
            raise EntityNotFoundError("Invoice", request.id)

        new_status = InvoiceStatus(request.status)
        changed = self.lifecycle_service.apply_status_change(invoice, new_status)

        saved_invoice = await self.invoice_repository.update(changed)
        self._collect_events(saved_invoice)

        logger.info(
            "Invoice status changed",
            extra={
                "invoice_id": saved_invoice.id,
                "from_status": invoice.status.value,
                "to_status": new_status.value
            }
        )
        return self._to_response(saved_invoice)


class GetInvoiceUseCase(_InvoiceResponseMixin, GetByIdUseCase[int, InvoiceResponseDTO]):
    """Use case for getting a live invoice by ID."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_business_logic(self, invoice_id: int) -> InvoiceResponseDTO:
        invoice = await self.invoice_repository.find_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundError("Invoice", invoice_id)

        return self._to_response(invoice)


class ListInvoicesUseCase(_InvoiceResponseMixin, ListUseCase[ListInvoicesRequestDTO, InvoiceListResponseDTO]):
    """Use case for listing invoices with filters and pagination."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        default_page_size: int = 10,
        max_page_size: int = 100,
        today: Callable[[], date] = date.today
    ):
        super().__init__(default_page_size, max_page_size)
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_business_logic(self, request: ListInvoicesRequestDTO) -> InvoiceListResponseDTO:
        page, limit, offset = self._page_window(request)
        as_of = self.today()

        filters = {
            "client_id": request.client_id,
            "status": InvoiceStatus(request.status) if request.status else None,
            "overdue_as_of": as_of if request.overdue else None,
        }
        invoices = await self.invoice_repository.list(offset=offset, limit=limit, **filters)
        total = await self.invoice_repository.count(**filters)

        return InvoiceListResponseDTO(
            invoices=[self._to_response(invoice, as_of) for invoice in invoices],
            pagination=PaginationDTO(page=page, limit=limit, total=total)
        )


class ListClientInvoicesUseCase(ListInvoicesUseCase):
    """Use case for listing the live invoices of one live client."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        client_repository: ClientRepository,
        lifecycle_service: InvoiceLifecycleService,
        default_page_size: int = 10,
        max_page_size: int = 100,
        today: Callable[[], date] = date.today
    ):
        super().__init__(invoice_repository, lifecycle_service, default_page_size, max_page_size, today)
        self.client_repository = client_repository

    async def _validate_request(self, request: ListInvoicesRequestDTO) -> None:
        await super()._validate_request(request)
        if not await self.client_repository.find_by_id(request.client_id):
            raise EntityNotFoundError("Client", request.client_id)


class DeleteInvoiceUseCase(DeleteUseCase[int, None]):
    """
    Use case for soft-deleting an invoice.
    Paid invoices cannot be deleted; every other status can.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service

    async def _execute_command_logic(self, invoice_id: int) -> None:
        invoice = await self.invoice_repository.find_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundError("Invoice", invoice_id)

        self.lifecycle_service.ensure_invoice_deletable(invoice)

        await self.invoice_repository.soft_delete(invoice)
        self._collect_events(invoice)

        logger.info("Invoice deleted", extra={"invoice_id": invoice_id, "number": invoice.number})


class FlagOverdueInvoicesUseCase(_InvoiceResponseMixin, UpdateUseCase[Optional[date], FlagOverdueResponseDTO]):
    """
    Use case moving every late sent invoice to the overdue status.
    The request is the reference day, today when None.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        lifecycle_service: InvoiceLifecycleService,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.invoice_repository = invoice_repository
        self.lifecycle_service = lifecycle_service
        self.today = today

    async def _execute_command_logic(self, as_of: Optional[date]) -> FlagOverdueResponseDTO:
        as_of = as_of or self.today()

        candidates = await self.invoice_repository.find_overdue_candidates(as_of)
        flagged = []
        for invoice in self.lifecycle_service.flag_overdue(candidates, as_of):
            saved_invoice = await self.invoice_repository.update(invoice)
            self._collect_events(saved_invoice)
            flagged.append(saved_invoice)

        logger.info("Flagged overdue invoices", extra={"as_of": as_of.isoformat(), "count": len(flagged)})
        return FlagOverdueResponseDTO(
            as_of=as_of,
            flagged=len(flagged),
            invoices=[self._to_response(invoice, as_of) for invoice in flagged]
        )
