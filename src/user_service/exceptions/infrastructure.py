"""
Infrastructure errors: database, authorization and timeout failures.

`details` on DatabaseError holds raw diagnostics (driver message, SQL state). It is
for logs only and is never part of an HTTP response.
"""

from typing import Any

from .base import AppError, FailureKind


class InfrastructureError(AppError):
    kind = FailureKind.INFRASTRUCTURE

    def __init__(self, message: str, component: str | None = None, *, error_code: str | None = None):
        super().__init__(message, error_code=error_code)
        self.component = component


class DatabaseError(InfrastructureError):
    kind = FailureKind.DATABASE_FAILED

    def __init__(self, operation: str, message: str, *, table_name: str | None = None,
                 details: str | None = None, error_code: str | None = None):
        super().__init__(message, "Database", error_code=error_code)
        self.operation = operation
        self.table_name = table_name
        self.details = details


class RepositoryError(DatabaseError):
    """A repository-level operation could not be completed (e.g. updating a row that is gone)."""

    kind = FailureKind.REPOSITORY_FAILED

    def __init__(self, repository_type: str, entity_id: Any, message: str, *, operation: str = "Repository",
                 table_name: str | None = None, details: str | None = None, error_code: str | None = None):
        super().__init__(operation, message, table_name=table_name, details=details, error_code=error_code)
        self.repository_type = repository_type
        self.entity_id = entity_id


class UnauthorizedError(InfrastructureError):
    kind = FailureKind.UNAUTHORIZED

    def __init__(self, message: str = "Access is denied due to invalid credentials.", *,
                 error_code: str | None = None):
        super().__init__(message, "Authorization", error_code=error_code)


class OperationTimeoutError(InfrastructureError):
    kind = FailureKind.TIMEOUT

    def __init__(self, message: str = "The operation timed out.", component: str | None = None, *,
                 error_code: str | None = None):
        super().__init__(message, component, error_code=error_code)


__all__ = [
    "InfrastructureError",
    "DatabaseError",
    "RepositoryError",
    "UnauthorizedError",
    "OperationTimeoutError",
]
