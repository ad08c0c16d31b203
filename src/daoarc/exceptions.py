"""Custom exceptions for the daoarc SDK."""

from __future__ import annotations

from typing import Any


class ArcError(Exception):
    """Base class for every error raised by daoarc."""

    def __init__(
        self,
        message: str,
        *,
        status: int = 0,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.details = details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status}, code={self.code!r}, "
            f"message={str(self)!r})"
        )


class ValidationError(ArcError):
    """Invalid input, detected before any I/O is issued."""


class InvalidAddressError(ValidationError):
    """A string is not a well-formed chain address."""


class UnknownSchemeError(ValidationError):
    """A scheme's module name has no proposal encoder."""


class NotFoundError(ArcError):
    """The indexer, ledger or contract registry has no record for an identifier."""


class IndexerError(ArcError):
    """Raised when the GraphQL indexer returns an error response."""


class TransactionError(ArcError):
    """A transaction was rejected, reverted or could not be submitted."""
