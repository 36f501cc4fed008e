"""
Invoice repository interface.
Defines the contract for invoice data persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from crudhub.domain.models.invoice import Invoice, InvoiceStatus, INVOICE_NUMBER_PREFIX


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice aggregate.
    """

    @abstractmethod
    async def add(self, invoice: Invoice) -> Invoice:
        """
        Persist a new invoice.
        Raises ConcurrencyConflictError if the number was taken by a concurrent insert.
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Persist changes to an existing invoice.
        Raises EntityNotFoundError if the invoice does not exist.
        """
        pass

    @abstractmethod
    async def find_by_id(self, invoice_id: int, include_deleted: bool = False) -> Optional[Invoice]:
        """
        Find an invoice by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_number(self, number: str) -> Optional[Invoice]:
        """
        Find an invoice by its number, deleted or not.
        """
        pass

    @abstractmethod
    async def count_live_invoices_for_client(self, client_id: int) -> int:
        """
        Count the invoices referencing a client that are not soft-deleted.
        """
        pass

    @abstractmethod
    async def count_invoices_issued_on(self, issue_date: date, prefix: str = INVOICE_NUMBER_PREFIX) -> int:
        """
        Same-day count: how many sequences are already taken by numbers issued
        for the day, soft-deleted invoices included. Read from the numbers, not
        from issue_date, which a patch can move to another day.
        """
        pass

    @abstractmethod
    async def list(
        self,
        offset: int = 0,
        limit: Optional[int] = 10,
        client_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        overdue_as_of: Optional[date] = None
    ) -> List[Invoice]:
        """
        List live invoices ordered by id. A limit of None returns every match.
        overdue_as_of restricts the result to sent/overdue invoices due before that day.
        """
        pass

    @abstractmethod
    async def count(
        self,
        client_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
        overdue_as_of: Optional[date] = None
    ) -> int:
        """
        Count invoices matching the same filters as list().
        """
        pass

    @abstractmethod
    async def find_overdue_candidates(self, as_of: date) -> List[Invoice]:
        """
        Find live sent invoices whose due date is before as_of.
        """
        pass

    @abstractmethod
    async def soft_delete(self, invoice: Invoice) -> None:
        """
        Mark an invoice as deleted. Its number stays reserved.
        """
        pass
