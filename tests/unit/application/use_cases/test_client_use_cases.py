"""
Unit tests for client use cases, run against in-memory repositories.
"""

import logging
import pytest
import pytest_asyncio
from datetime import date
from decimal import Decimal

from crudhub.application.dto.client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    ListClientsRequestDTO
)
from crudhub.application.use_cases.client_use_cases import (
    CreateClientUseCase,
    UpdateClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    DeleteClientUseCase
)
from crudhub.domain.models.base import (
    ValidationError,
    ReferentialGuardError,
    EntityNotFoundError,
    DuplicateEntityError
)
from crudhub.domain.models.invoice import Invoice, InvoiceStatus


async def add_invoice(invoice_repository, client_id, **overrides):
    fields = dict(
        number=f"INV-20240301-{invoice_repository.next_id}",
        client_id=client_id,
        amount=Decimal("100.00"),
        status=InvoiceStatus.SENT,
        issue_date=date(2024, 3, 1),
        due_date=date(2024, 3, 10)
    )
    fields.update(overrides)
    return await invoice_repository.add(Invoice(**fields))


class TestCreateClientUseCase:
    """Test cases for client creation."""

    @pytest.mark.asyncio
    async def test_create_client_success(self, client_repository):
        """Test creating a client."""
        use_case = CreateClientUseCase(client_repository)

        response = await use_case.execute(CreateClientRequestDTO(
            name="Acme Corp",
            email="billing@acme.com",
            phone="555-0100"
        ))

        assert response.id == 1
        assert response.name == "Acme Corp"
        assert response.address is None

    @pytest.mark.asyncio
    async def test_create_client_publishes_event(self, client_repository, caplog):
        """Test that the created event is logged once the command succeeded."""
        use_case = CreateClientUseCase(client_repository)

        with caplog.at_level(logging.INFO):
            await use_case.execute(CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com"))

        events = [record.event["event_name"] for record in caplog.records if hasattr(record, "event")]
        assert events == ["client.created"]
        assert use_case.events == []

    @pytest.mark.asyncio
    async def test_create_client_validation_error(self, client_repository):
        """Test creating a client with a blank name."""
        use_case = CreateClientUseCase(client_repository)

        with pytest.raises(ValidationError, match="Client name is required"):
            await use_case.execute(CreateClientRequestDTO(name="  ", email="billing@acme.com"))

        assert client_repository.rows == {}

    @pytest.mark.asyncio
    async def test_create_client_duplicate_email(self, client_repository):
        """Test that emails are unique."""
        use_case = CreateClientUseCase(client_repository)
        await use_case.execute(CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com"))

        with pytest.raises(DuplicateEntityError):
            await CreateClientUseCase(client_repository).execute(
                CreateClientRequestDTO(name="Acme Again", email="billing@acme.com")
            )


class TestUpdateClientUseCase:
    """Test cases for client updates."""

    @pytest_asyncio.fixture
    async def client_id(self, client_repository):
        response = await CreateClientUseCase(client_repository).execute(
            CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com", phone="555-0100")
        )
        return response.id

    @pytest.mark.asyncio
    async def test_partial_update(self, client_repository, lifecycle_service, client_id):
        """Test that only non-empty fields overwrite."""
        use_case = UpdateClientUseCase(client_repository, lifecycle_service)

        response = await use_case.execute(UpdateClientRequestDTO(id=client_id, name="Acme Inc", phone=""))

        assert response.name == "Acme Inc"
        assert response.phone == "555-0100"
        assert response.email == "billing@acme.com"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client_repository, lifecycle_service, client_id):
        """Test that a patched email is validated."""
        use_case = UpdateClientUseCase(client_repository, lifecycle_service)

        with pytest.raises(ValidationError, match="Invalid email format"):
            await use_case.execute(UpdateClientRequestDTO(id=client_id, email="nope"))

    @pytest.mark.asyncio
    async def test_email_taken_by_other_client(self, client_repository, lifecycle_service, client_id):
        """Test moving to an email another client uses."""
        await CreateClientUseCase(client_repository).execute(
            CreateClientRequestDTO(name="Globex", email="ops@globex.com")
        )
        use_case = UpdateClientUseCase(client_repository, lifecycle_service)

        with pytest.raises(DuplicateEntityError):
            await use_case.execute(UpdateClientRequestDTO(id=client_id, email="ops@globex.com"))

    @pytest.mark.asyncio
    async def test_missing_client(self, client_repository, lifecycle_service):
        """Test updating a client that does not exist."""
        with pytest.raises(EntityNotFoundError):
            await UpdateClientUseCase(client_repository, lifecycle_service).execute(
                UpdateClientRequestDTO(id=3, name="Nobody")
            )


class TestClientQueries:
    """Test cases for client reads."""

    @pytest.mark.asyncio
    async def test_get_client_with_live_invoices(
        self, client_repository, invoice_repository, lifecycle_service, today
    ):
        """Test that the detail view lists live invoices only."""
        client = await CreateClientUseCase(client_repository).execute(
            CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com")
        )
        await add_invoice(invoice_repository, client.id)
        deleted = await add_invoice(invoice_repository, client.id)
        await invoice_repository.soft_delete(deleted)
        use_case = GetClientUseCase(client_repository, invoice_repository, lifecycle_service, today=today)

        response = await use_case.execute(client.id)

        assert response.name == "Acme Corp"
        assert len(response.invoices) == 1
        assert response.invoices[0].is_overdue is True

    @pytest.mark.asyncio
    async def test_list_clients_search(self, client_repository):
        """Test searching by name or email."""
        create = CreateClientUseCase(client_repository)
        await create.execute(CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com"))
        await CreateClientUseCase(client_repository).execute(
            CreateClientRequestDTO(name="Globex", email="ops@globex.com")
        )

        response = await ListClientsUseCase(client_repository).execute(ListClientsRequestDTO(search="globex"))

        assert [client.name for client in response.clients] == ["Globex"]
        assert response.pagination.total == 1
        assert response.pagination.page == 1
        assert response.pagination.limit == 10


class TestDeleteClientUseCase:
    """Test cases for client deletion."""

    @pytest.fixture
    def use_case(self, client_repository, invoice_repository, lifecycle_service):
        return DeleteClientUseCase(client_repository, invoice_repository, lifecycle_service)

    @pytest_asyncio.fixture
    async def client_id(self, client_repository):
        response = await CreateClientUseCase(client_repository).execute(
            CreateClientRequestDTO(name="Acme Corp", email="billing@acme.com")
        )
        return response.id

    @pytest.mark.asyncio
    async def test_client_with_invoices_blocked(self, use_case, client_repository, invoice_repository, client_id):
        """Test deleting a client that owns two live invoices."""
        await add_invoice(invoice_repository, client_id)
        await add_invoice(invoice_repository, client_id)

        with pytest.raises(ReferentialGuardError) as exc_info:
            await use_case.execute(client_id)

        assert exc_info.value.blocking_count == 2
        assert await client_repository.find_by_id(client_id) is not None

    @pytest.mark.asyncio
    async def test_client_without_invoices_deleted(self, use_case, client_repository, client_id):
        """Test deleting a client with no live invoices."""
        await use_case.execute(client_id)

        assert await client_repository.find_by_id(client_id) is None
        assert client_repository.locked_ids == [client_id]

    @pytest.mark.asyncio
    async def test_deleted_invoices_do_not_block(self, use_case, client_repository, invoice_repository, client_id):
        """Test that soft-deleted invoices are not counted."""
        invoice = await add_invoice(invoice_repository, client_id)
        await invoice_repository.soft_delete(invoice)

        await use_case.execute(client_id)

        assert await client_repository.find_by_id(client_id) is None

    @pytest.mark.asyncio
    async def test_missing_client(self, use_case):
        """Test deleting a client that does not exist."""
        with pytest.raises(EntityNotFoundError):
            await use_case.execute(404)

    @pytest.mark.asyncio
    async def test_invalid_id(self, use_case):
        """Test that non-positive ids are rejected."""
        with pytest.raises(ValidationError, match="ID must be positive"):
            await use_case.execute(-1)
