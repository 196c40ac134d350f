from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""


class NotFoundError(DomainError):
    """Raised when a referenced event, position, signup or message is absent."""


class RpcFailure(DomainError):
    """Raised when a filled-count update failed after the row mutation committed."""

    def __init__(self, position_id: str, operation: str, cause: Exception | None = None):
        self.position_id = position_id
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed for position {position_id}")
