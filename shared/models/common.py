"""
Common Models
=============

Base model, response wrappers and pagination helpers.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiModel(BaseModel):
    """
    Base for models exchanged over the API.

    Fields are snake_case in Python and camelCase on the wire (via explicit
    aliases); either spelling is accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PaginatedResponse(ApiModel, Generic[T]):
    """Paginated API response."""

    items: list[T]
    total: int
    page: int = 1
    page_size: int = Field(default=20, alias="pageSize")
    pages: int = 1

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


class MessageResponse(ApiModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = False
    error: str
    status_code: int
    details: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Component health
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @property
    def is_healthy(self) -> bool:
        """Check if all components are healthy."""
        if self.status != "healthy":
            return False
        return all(
            c.get("status") in ("healthy", "disabled") for c in self.components.values()
        )


class Pagination(BaseModel):
    """Pagination parameters."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit for database queries."""
        return self.page_size

    def pages_for(self, total: int) -> int:
        """Number of pages needed for ``total`` rows (at least one)."""
        return (total + self.page_size - 1) // self.page_size if total > 0 else 1
