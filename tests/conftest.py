"""
Shared fixtures: in-memory repositories for use case tests and an API
client backed by an in-memory SQLite database.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from crudhub.config import Settings
from crudhub.domain.models.base import ConcurrencyConflictError, DuplicateEntityError
from crudhub.domain.models.client import Client
from crudhub.domain.models.invoice import (
    Invoice, InvoiceNumber, InvoiceStatus, INVOICE_NUMBER_PREFIX, OVERDUE_ELIGIBLE_STATUSES
)
from crudhub.domain.repositories.client_repository import ClientRepository
from crudhub.domain.repositories.invoice_repository import InvoiceRepository
from crudhub.domain.services.lifecycle_service import InvoiceLifecycleService
from crudhub.domain.services.numbering_service import NumberingService
from crudhub.infrastructure.db.database import Database
from crudhub.main import create_application


TODAY = date(2024, 3, 15)


class InMemoryClientRepository(ClientRepository):
    """Client repository keeping copies of the stored entities."""

    def __init__(self):
        self.rows: Dict[int, Client] = {}
        self.next_id = 1
        self.locked_ids: List[int] = []

    async def add(self, client: Client) -> Client:
        if await self.find_by_email(client.email):
            raise DuplicateEntityError("Client", "email", client.email)
        client.id = self.next_id
        self.next_id += 1
        self.rows[client.id] = replace(client)
        return client

    async def update(self, client: Client) -> Client:
        self.rows[client.id] = replace(client)
        return client

    async def find_by_id(self, client_id: int, include_deleted: bool = False) -> Optional[Client]:
        client = self.rows.get(client_id)
        if client is None or (client.is_deleted and not include_deleted):
            return None
        return replace(client)

    async def find_by_id_for_update(self, client_id: int) -> Optional[Client]:
        self.locked_ids.append(client_id)
        return await self.find_by_id(client_id)

    async def find_by_email(self, email: str) -> Optional[Client]:
        for client in self.rows.values():
            if client.email.lower() == email.lower():
                return replace(client)
        return None

    def _matching(self, search: Optional[str], include_deleted: bool) -> List[Client]:
        clients = [c for c in self.rows.values() if include_deleted or not c.is_deleted]
        if search:
            term = search.lower()
            clients = [c for c in clients if term in c.name.lower() or term in c.email.lower()]
        return clients

    async def list(self, offset=0, limit=10, search=None, include_deleted=False) -> List[Client]:
        clients = self._matching(search, include_deleted)
        return [replace(c) for c in clients[offset:offset + limit]]

    async def count(self, search=None, include_deleted=False) -> int:
        return len(self._matching(search, include_deleted))

    async def soft_delete(self, client: Client) -> None:
        client.mark_deleted(datetime(2024, 3, 15, 12, 0))
        self.rows[client.id] = replace(client)


class InMemoryInvoiceRepository(InvoiceRepository):
    """
    Invoice repository enforcing number uniqueness like the database does.
    stale_counts lets a test hand out outdated same-day counts, as a
    concurrent request would see them.
    """

    def __init__(self):
        self.rows: Dict[int, Invoice] = {}
        self.next_id = 1
        self.stale_counts: List[int] = []
        self.add_attempts = 0

    async def add(self, invoice: Invoice) -> Invoice:
        self.add_attempts += 1
        if any(existing.number == invoice.number for existing in self.rows.values()):
            raise ConcurrencyConflictError(f"Invoice number {invoice.number} was taken")
        invoice.id = self.next_id
        self.next_id += 1
        self.rows[invoice.id] = replace(invoice)
        return invoice

    async def update(self, invoice: Invoice) -> Invoice:
        self.rows[invoice.id] = replace(invoice)
        return invoice

    async def find_by_id(self, invoice_id: int, include_deleted: bool = False) -> Optional[Invoice]:
        invoice = self.rows.get(invoice_id)
        if invoice is None or (invoice.is_deleted and not include_deleted):
            return None
        return replace(invoice)

    async def find_by_number(self, number: str) -> Optional[Invoice]:
        for invoice in self.rows.values():
            if invoice.number == number:
                return replace(invoice)
        return None

    async def count_live_invoices_for_client(self, client_id: int) -> int:
        return len([i for i in self.rows.values() if i.client_id == client_id and not i.is_deleted])

    async def count_invoices_issued_on(self, issue_date: date, prefix: str = INVOICE_NUMBER_PREFIX) -> int:
        if self.stale_counts:
            return self.stale_counts.pop(0)
        day_prefix = InvoiceNumber.day_prefix(issue_date, prefix)
        return InvoiceNumber.last_sequence((i.number for i in self.rows.values()), day_prefix)

    def _matching(self, client_id, status, overdue_as_of) -> List[Invoice]:
        invoices = [i for i in self.rows.values() if not i.is_deleted]
        if client_id is not None:
            invoices = [i for i in invoices if i.client_id == client_id]
        if status is not None:
            invoices = [i for i in invoices if i.status == InvoiceStatus(status)]
        if overdue_as_of is not None:
            invoices = [
                i for i in invoices
                if i.status in OVERDUE_ELIGIBLE_STATUSES and i.due_date and i.due_date < overdue_as_of
            ]
        return invoices

    async def list(self, offset=0, limit=10, client_id=None, status=None, overdue_as_of=None) -> List[Invoice]:
        invoices = self._matching(client_id, status, overdue_as_of)[offset:]
        if limit is not None:
            invoices = invoices[:limit]
        return [replace(i) for i in invoices]

    async def count(self, client_id=None, status=None, overdue_as_of=None) -> int:
        return len(self._matching(client_id, status, overdue_as_of))

    async def find_overdue_candidates(self, as_of: date) -> List[Invoice]:
        return [
            replace(i) for i in self.rows.values()
            if not i.is_deleted and i.status == InvoiceStatus.SENT and i.due_date and i.due_date < as_of
        ]

    async def soft_delete(self, invoice: Invoice) -> None:
        invoice.mark_deleted(datetime(2024, 3, 15, 12, 0))
        self.rows[invoice.id] = replace(invoice)


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def lifecycle_service():
    return InvoiceLifecycleService()


@pytest.fixture
def numbering_service():
    return NumberingService()


@pytest.fixture
def client_repository():
    return InMemoryClientRepository()


@pytest.fixture
def invoice_repository():
    return InMemoryInvoiceRepository()


@pytest.fixture
def settings():
    """Settings for an isolated in-memory database."""
    return Settings(
        _env_file=None,
        environment="testing",
        debug=False,
        database_url="sqlite://",
        cors_origins="http://testserver",
    )


@pytest.fixture
def api(settings):
    """Test client for a fresh application and database."""
    database = Database.from_settings(settings)
    app = create_application(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client
