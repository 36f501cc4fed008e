"""
Client repository interface.
Defines the contract for client data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from crudhub.domain.models.client import Client


class ClientRepository(ABC):
    """
    Repository interface for Client aggregate.
    Soft-deleted clients are hidden unless include_deleted is set.
    """

    @abstractmethod
    async def add(self, client: Client) -> Client:
        """
        Persist a new client.
        Returns the client with its generated id and timestamps.
        Raises DuplicateEntityError if the email is already taken.
        """
        pass

    @abstractmethod
    async def update(self, client: Client) -> Client:
        """
        Persist changes to an existing client.
        Raises EntityNotFoundError if the client does not exist.
        """
        pass

    @abstractmethod
    async def find_by_id(self, client_id: int, include_deleted: bool = False) -> Optional[Client]:
        """
        Find a client by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_id_for_update(self, client_id: int) -> Optional[Client]:
        """
        Find a live client and lock its row until the transaction ends.
        Used to serialize client deletion against invoice creation.
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Client]:
        """
        Find a live client by email.
        """
        pass

    @abstractmethod
    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        include_deleted: bool = False
    ) -> List[Client]:
        """
        List clients ordered by id, optionally filtered by a name/email search.
        """
        pass

    @abstractmethod
    async def count(self, search: Optional[str] = None, include_deleted: bool = False) -> int:
        """
        Count clients matching the same filters as list().
        """
        pass

    @abstractmethod
    async def soft_delete(self, client: Client) -> None:
        """
        Mark a client as deleted.
        """
        pass
