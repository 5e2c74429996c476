"""HTTP-facing error types raised by the report service and routes."""
from __future__ import annotations

from fastapi import HTTPException, status


class ReportValidationError(HTTPException):
    """Malformed or missing input."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationRequiredError(HTTPException):
    """No usable identity was supplied with a mutating request."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class OwnershipError(HTTPException):
    """The caller is not allowed to mutate the target report."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ReportNotFoundError(HTTPException):
    def __init__(self, detail: str = "Report not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UpstreamServiceError(HTTPException):
    """Image hosting or geocoding failure surfaced to the client.

    Geocoding failures are the caller's input problem (400); upload failures
    are ours (500).
    """

    def __init__(self, detail: str, *, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(status_code=status_code, detail=detail)


class InternalServiceError(HTTPException):
    """Opaque failure; the cause is only logged server side."""

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


__all__ = [
    "ReportValidationError",
    "AuthenticationRequiredError",
    "OwnershipError",
    "ReportNotFoundError",
    "UpstreamServiceError",
    "InternalServiceError",
]
