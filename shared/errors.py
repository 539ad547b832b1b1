"""
Errors
======

Exception taxonomy shared by the data layer and the compliance service.

Profile validation failures are pydantic ``ValidationError`` instances raised
by the input models; everything else derives from ``BizcomplyError``.

Version: 0.1.0
"""


class BizcomplyError(Exception):
    """Base class for application errors."""


class NotFoundError(BizcomplyError):
    """A referenced record (business, regulation) does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StorageError(BizcomplyError):
    """Underlying read or write against the relational store failed."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"storage operation failed ({operation}){detail}")


class CacheError(BizcomplyError):
    """Cache backend failure. Logged and treated as a miss, never raised to callers."""
