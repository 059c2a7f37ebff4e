"""
Domain errors raised by services.

Each error is an HTTPException so routes and the services' `except HTTPException: raise`
blocks pass them through untouched, while callers outside HTTP can still catch them by type.
"""

from fastapi import HTTPException, status


class CommitteeDashboardError(HTTPException):
    """Base class for errors raised by the data-access layer"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed"

    def __init__(self, detail: str = None, status_code: int = None):
        super().__init__(
            status_code=status_code or self.status_code,
            detail=detail or self.default_detail,
        )


class AuthError(CommitteeDashboardError):
    """Bad credentials, invalid token or duplicate signup"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication failed"


class NotFoundError(CommitteeDashboardError):
    """Row absent, or not visible from the caller's committee"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ForbiddenError(CommitteeDashboardError):
    """Role insufficient for the requested operation"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class ValidationError(CommitteeDashboardError):
    """Cross-committee reference or malformed field"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid data"


class InconsistentStateError(CommitteeDashboardError):
    """A multi-step operation failed part-way through"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Operation left the system in an inconsistent state"
