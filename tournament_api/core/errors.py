"""Service error taxonomy. Each error knows the HTTP status it surfaces as."""
from typing import List, Optional


class ServiceError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class DatabaseUnavailable(ServiceError):
    """Pool never established or connectivity flag is false. The database is not touched."""

    status_code = 503
    code = "database_unavailable"

    def __init__(self, message: str = "Database unavailable", details: Optional[List[str]] = None) -> None:
        super().__init__(message, details)


class QueryFailure(ServiceError):
    """The driver raised while running a query."""

    status_code = 500
    code = "query_failed"


class ValidationFailure(ServiceError):
    status_code = 400
    code = "validation_failed"


class WriteRefused(ServiceError):
    """Role or read-only policy blocks a write."""

    status_code = 423
    code = "write_refused"
