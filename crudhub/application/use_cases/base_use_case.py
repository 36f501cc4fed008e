"""
Base use case classes for the application layer.

A use case is a single operation: it validates its request, runs against the
repositories it was built with and returns a DTO. Domain errors are not
caught here; the web layer renders them.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar, Generic, List, Tuple

from crudhub.domain.models.base import BaseEntity, DomainEvent, ValidationError


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class BaseUseCase(ABC, Generic[T, R]):
    """Template for every use case: validate, then run."""

    async def execute(self, request: T) -> R:
        started = time.perf_counter()

        await self._validate_request(request)
        result = await self._execute_business_logic(request)

        logger.debug("%s completed in %.3fs", type(self).__name__, time.perf_counter() - started)
        return result

    async def _validate_request(self, request: T) -> None:
        """Request checks beyond what the DTO enforces. None by default."""

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        ...


class QueryUseCase(BaseUseCase[T, R]):
    """Read-only use case."""


class CommandUseCase(BaseUseCase[T, R]):
    """
    Write use case.
    Events raised by the entities it touches are published only after the
    command logic returned without error.
    """

    def __init__(self):
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, request: T) -> R:
        result = await self._execute_command_logic(request)
        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        ...

    def _collect_events(self, entity: BaseEntity) -> None:
        self.events.extend(entity.pull_events())

    async def _publish_events(self) -> None:
        # The application log is the event sink
        while self.events:
            event = self.events.pop(0)
            logger.info("Domain event %s", event.event_name, extra={"event": event.to_dict()})


class PaginatedQueryUseCase(QueryUseCase[T, R]):
    """Read use case returning one page of a filtered list."""

    def __init__(self, default_page_size: int = 10, max_page_size: int = 100):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _page_window(self, request: Any) -> Tuple[int, int, int]:
        """Return (page, limit, offset), the limit capped at max_page_size."""
        page = max(getattr(request, 'page', None) or 1, 1)
        limit = min(getattr(request, 'limit', None) or self.default_page_size, self.max_page_size)
        return page, limit, (page - 1) * limit


class CreateUseCase(CommandUseCase[T, R]):
    pass


class UpdateUseCase(CommandUseCase[T, R]):
    pass


class DeleteUseCase(CommandUseCase[T, R]):
    """Deletes take the entity ID as their request."""

    async def _validate_request(self, request: T) -> None:
        await super()._validate_request(request)
        _require_positive_id(request)


class GetByIdUseCase(QueryUseCase[T, R]):
    """Lookups take the entity ID as their request."""

    async def _validate_request(self, request: T) -> None:
        await super()._validate_request(request)
        _require_positive_id(request)


class ListUseCase(PaginatedQueryUseCase[T, R]):
    pass


def _require_positive_id(request: Any) -> None:
    entity_id = request if isinstance(request, int) else getattr(request, 'id', None)
    if entity_id is not None and entity_id <= 0:
        raise ValidationError("ID must be positive", "id")
