"""
Exception hierarchy for the content index.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the content index
"""

from typing import Any


class ContentIndexException(Exception):
    """Base exception for all content index errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ContentIndexException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class EmbeddingError(ContentIndexException):
    """Raised by embedding providers when a call fails."""

    def __init__(
        self,
        message: str,
        item_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding error.

        Args:
            message: Error message
            item_count: Number of texts in the failed call
            details: Additional context
        """
        details = details or {}
        if item_count is not None:
            details["item_count"] = item_count
        super().__init__(message, details)


class QuotaExceededError(EmbeddingError):
    """Raised when the provider reports quota or rate-limit exhaustion (429)."""

    pass


class VectorStoreError(ContentIndexException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (open, upsert, scan, clear)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StorageUnavailableError(VectorStoreError):
    """Raised when the backing persistence layer cannot be opened or used."""

    pass
