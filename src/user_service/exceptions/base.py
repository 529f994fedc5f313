"""
Application error taxonomy: domain-level errors.

Every error raised deliberately by this service derives from `AppError` and carries:

- kind:       a `FailureKind` discriminant (class attribute) used for classification
- message:    human-friendly text; for client-caused kinds this becomes the response `detail`
- error_code: stable machine-readable code, defaults to the class name

Hierarchy:

    AppError
    ├── DomainError                      client-caused, safe to describe to the caller
    │   ├── EntityNotFoundError          -> UserNotFoundError, UserEmailNotFoundError
    │   ├── DomainValidationError
    │   ├── ConflictError                -> DuplicateUserEmailError
    │   └── BusinessRuleViolationError
    ├── InvalidArgumentError (ValueError)-> MissingArgumentError
    ├── ApplicationError                 see application.py
    └── InfrastructureError              see infrastructure.py
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping


class FailureKind(str, Enum):
    NOT_FOUND = "NotFound"
    VALIDATION_FAILED = "ValidationFailed"
    CONFLICT = "Conflict"
    BUSINESS_RULE_VIOLATION = "BusinessRuleViolation"
    DOMAIN = "Domain"
    INVALID_ARGUMENT = "InvalidArgument"
    APPLICATION = "Application"
    SERVICE_OPERATION_FAILED = "ServiceOperationFailed"
    INFRASTRUCTURE = "Infrastructure"
    DATABASE_FAILED = "DatabaseFailed"
    REPOSITORY_FAILED = "RepositoryFailed"
    UNAUTHORIZED = "Unauthorized"
    TIMEOUT = "Timeout"
    UNKNOWN = "Unknown"


class AppError(Exception):
    """
    Root of the taxonomy. Not raised directly.

    `error_code` can be overridden per instance, e.g.
        raise ConflictError("a@b.com", "email", error_code="EMAIL_TAKEN")
    """

    kind: FailureKind = FailureKind.UNKNOWN

    def __init__(self, message: str, *, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__

    def __str__(self) -> str:
        return self.message


# =================================================================================================================
# Domain errors (client-caused)
# =================================================================================================================

class DomainError(AppError):
    """Generic business-logic failure; specific kinds below are preferred when they fit."""

    kind = FailureKind.DOMAIN


class EntityNotFoundError(DomainError):
    """
    A requested entity does not exist.

    EntityNotFoundError("User", "123").message
        == "The User with identifier '123' was not found."
    """

    kind = FailureKind.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None, *,
                 error_code: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"The {entity_type} with identifier '{entity_id}' was not found.",
            error_code=error_code,
        )


class UserNotFoundError(EntityNotFoundError):
    def __init__(self, user_id: Any, *, error_code: str | None = None):
        super().__init__("User", str(user_id), error_code=error_code)


class UserEmailNotFoundError(EntityNotFoundError):
    def __init__(self, email: str, *, error_code: str | None = None):
        super().__init__("User", email, error_code=error_code)


class DomainValidationError(DomainError):
    """
    One or more field-level validation failures for a target type.

    The errors mapping is frozen at construction (read-only mapping of tuples); use
    `ValidationErrorBuilder` (validation.py) to accumulate violations before raising.
    Fields without messages are dropped, and at least one message is required.
    """

    kind = FailureKind.VALIDATION_FAILED

    def __init__(self, errors: Mapping[str, Iterable[str]], target_type: str | None = None,
                 message: str | None = None, *, error_code: str | None = None):
        frozen = {field: tuple(messages) for field, messages in errors.items()}
        frozen = {field: messages for field, messages in frozen.items() if messages}
        if not frozen:
            raise ValueError("DomainValidationError requires at least one field with at least one message")

        self.errors: Mapping[str, tuple[str, ...]] = MappingProxyType(frozen)
        self.target_type = target_type

        default = f"Validation failed for {target_type}." if target_type else "Validation failed."
        super().__init__(message or default, error_code=error_code)


class ConflictError(DomainError):
    """
    A write would violate a uniqueness rule (e.g. an email already in use).

    `field` may hold several comma-separated column names when the conflict was
    detected by the database rather than by a pre-check.
    """

    kind = FailureKind.CONFLICT

    def __init__(self, value: Any = None, field: str | None = None, message: str | None = None, *,
                 error_code: str | None = None):
        self.value = value
        self.field = field

        if message is None:
            if field and value is not None:
                message = f"A resource with {field} '{value}' already exists."
            elif field:
                message = f"A resource with the same {field} already exists."
            else:
                message = "The resource already exists."
        super().__init__(message, error_code=error_code)


class DuplicateUserEmailError(ConflictError):
    def __init__(self, email: str, *, error_code: str | None = None):
        super().__init__(email, "email", f"A user with email '{email}' already exists.", error_code=error_code)


class BusinessRuleViolationError(DomainError):
    """
    A named business rule was violated. `context` may be enriched with `add_context`
    while the error propagates; it is sent to clients, so keep it free of secrets.
    """

    kind = FailureKind.BUSINESS_RULE_VIOLATION

    def __init__(self, rule_name: str | None = None, message: str | None = None,
                 context: Mapping[str, Any] | None = None, *, error_code: str | None = None):
        self.rule_name = rule_name or "Unknown"
        self.context: dict[str, Any] = dict(context) if context else {}

        if message is None:
            message = (
                f"Business rule '{rule_name}' was violated." if rule_name
                else "A business rule was violated."
            )
        super().__init__(message, error_code=error_code)

    def add_context(self, key: str, value: Any) -> "BusinessRuleViolationError":
        self.context[key] = value
        return self


# =================================================================================================================
# Argument errors (malformed input detected before persistence)
# =================================================================================================================

class InvalidArgumentError(AppError, ValueError):
    """
    Malformed caller input (empty id, malformed email, ...).

    Also a ValueError so generic `except ValueError` code keeps working.
    """

    kind = FailureKind.INVALID_ARGUMENT

    def __init__(self, param_name: str, message: str | None = None, *, error_code: str | None = None):
        self.param_name = param_name
        super().__init__(message or f"Invalid value for parameter '{param_name}'.", error_code=error_code)


class MissingArgumentError(InvalidArgumentError):
    def __init__(self, param_name: str, message: str | None = None, *, error_code: str | None = None):
        super().__init__(param_name, message or f"Parameter '{param_name}' is required.", error_code=error_code)


__all__ = [
    "FailureKind",
    "AppError",
    "DomainError",
    "EntityNotFoundError",
    "UserNotFoundError",
    "UserEmailNotFoundError",
    "DomainValidationError",
    "ConflictError",
    "DuplicateUserEmailError",
    "BusinessRuleViolationError",
    "InvalidArgumentError",
    "MissingArgumentError",
]
