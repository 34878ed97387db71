"""
Exception hierarchy for the ITS registry validator.

Lookup adapters raise these instead of leaking transport-specific errors
(web3, requests) into the validation engine, so the engine can tell a
"could not determine" failure apart from a record that is actually wrong.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class RegistryError(Exception):
    """Base exception for all registry validation errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


# ==================== Lookup Errors ====================


class LookupFailure(RegistryError):
    """Raised when a remote lookup (RPC node, metadata API) itself errors.

    Distinct from a mismatch: the value could not be determined at all.
    Usually transient, hence recoverable by default.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)


# ==================== Input Errors ====================


class RecordFormatError(RegistryError):
    """Raised when a token record or the registry document is malformed.

    Attributes:
        token_id: Key of the offending record, if the error is record-scoped
    """

    def __init__(
        self,
        message: str,
        token_id: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.token_id = token_id


class ChainDirectoryError(RegistryError):
    """Raised when the chain endpoint table cannot be loaded."""
    pass


# ==================== Utility Functions ====================


def get_error_context(exc: Exception) -> Dict[str, Any]:
    """Extract error context from an exception for logging."""
    context: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, RegistryError):
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    if isinstance(exc, RecordFormatError) and exc.token_id:
        context["token_id"] = exc.token_id

    return context
