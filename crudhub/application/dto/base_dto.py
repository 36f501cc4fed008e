"""
Base DTOs for the application layer.
Requests reject unknown fields, so read-only values such as an invoice
number cannot be smuggled into a patch.
"""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class BaseDTO(BaseModel):
    """Common configuration for every DTO."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
        extra="forbid"
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""


class ResponseDTO(BaseDTO):
    """Base class for entity responses: identity and audit timestamps."""

    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateRequestDTO(RequestDTO):
    """Base class for creation requests."""


class UpdateRequestDTO(RequestDTO):
    """Base class for partial updates. None means "not supplied"."""


class ListRequestDTO(RequestDTO):
    """Page window of a list request; the use case caps the limit."""

    page: int = Field(default=1, ge=1, description="Page number, starting at 1")
    limit: int = Field(default=10, ge=1, description="Items per page")


class PaginationDTO(BaseDTO):
    """Pagination block of list responses."""

    page: int
    limit: int
    total: int = Field(description="Matching items across all pages")


class HealthCheckResponseDTO(BaseDTO):
    status: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: Optional[str] = None
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Status of each backing service")


class ErrorResponseDTO(BaseDTO):
    """Body of every error response."""

    error: str = Field(description="Short error title")
    message: str
    code: str = Field(description="Stable machine-readable code, e.g. REFERENTIAL_GUARD")
    status_code: int
    details: Dict[str, Any] = Field(default_factory=dict)


class MessageResponseDTO(BaseDTO):
    """Plain confirmation message."""

    message: str
