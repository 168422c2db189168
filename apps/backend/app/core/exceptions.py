"""
Error taxonomy for the relay.

Services raise these; the FastAPI exception handlers in ``app.main`` are the
only place an ``ErrorKind`` is turned into an HTTP status code.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of a handler failure."""

    INVALID = "invalid"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"
    TIMEOUT = "timeout"


class RelayError(Exception):
    """Base exception for all relay errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RelayError):
    """A required request field is missing or malformed."""

    kind = ErrorKind.INVALID

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message, {"missing": missing or []})

    @property
    def missing(self) -> list[str]:
        return self.details["missing"]


class NotFoundError(RelayError):
    """The referenced user is absent from the directory or the store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, resource: str, identifier: Any):
        super().__init__(message, {"resource": resource, "identifier": identifier})


class UpstreamError(RelayError):
    """A collaborator (Stream, database, LLM) call failed."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, service: str, cause: BaseException):
        self.service = service
        self.cause = cause
        super().__init__(f"{service} error: {cause}", {"service": service})


class UpstreamTimeoutError(RelayError):
    """A handler did not finish within the configured request timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, operation: str, timeout: float):
        super().__init__(
            f"{operation} timed out after {timeout:g}s",
            {"operation": operation, "timeout": timeout},
        )
