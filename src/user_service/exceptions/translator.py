"""
Exception -> HTTP error response translation.

`TRANSLATION_RULES` is an ordered table evaluated top to bottom; the first rule whose
`matches` types accept the exception (isinstance) wins. Specific kinds therefore come
before the kinds they specialize:

| #  | Rule             | Status | Title                     | Code             | Log level |
| -- | ---------------- | ------ | ------------------------- | ---------------- | --------- |
| 1  | not_found        | 404    | Resource Not Found        | error_code       | TRACE     |
| 2  | validation       | 400    | Validation Failed         | error_code       | WARNING   |
| 3  | conflict         | 409    | Resource Conflict         | error_code       | WARNING   |
| 4  | business_rule    | 400    | Business Logic Error      | error_code       | WARNING   |
| 5  | domain           | 400    | Business Logic Error      | error_code       | WARNING   |
| 6  | invalid_argument | 400    | Invalid Request Parameter | ARGUMENT_INVALID | WARNING   |
| 7  | unauthorized     | 401    | Unauthorized              | UNAUTHORIZED     | WARNING   |
| 8  | timeout          | 408    | Request Timeout           | TIMEOUT_ERROR    | ERROR     |
| 9  | internal         | 500    | Internal Server Error     | INTERNAL_ERROR   | ERROR     |
| 10 | unknown          | 500    | Internal Server Error     | UNKNOWN_ERROR    | ERROR     |

Rules 7 and 8 must stay above rule 9: UnauthorizedError and OperationTimeoutError are
InfrastructureError subclasses.

Rules 7 to 10 use a fixed `detail`; the exception message (which may hold SQL, driver
text or a wrapped cause) is never copied into the response for server-side kinds.

`translate_exception` is pure: the same exception and path always give an equal
ErrorResponse.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from user_service.core.logging.levels import TRACE
from user_service.schemas.errors import ErrorResponse

from .application import ApplicationError
from .base import (
    BusinessRuleViolationError,
    ConflictError,
    DomainError,
    DomainValidationError,
    EntityNotFoundError,
    FailureKind,
    InvalidArgumentError,
)
from .infrastructure import InfrastructureError, OperationTimeoutError, UnauthorizedError

INTERNAL_ERROR_DETAIL = "An error occurred while processing your request"
UNKNOWN_ERROR_DETAIL = "An unexpected error occurred. Please try again later."
TIMEOUT_DETAIL = "The operation timed out. Please try again later."
UNAUTHORIZED_DETAIL = "Access is denied due to invalid credentials."


ExtensionsBuilder = Callable[[BaseException], dict[str, Any]]


@dataclass(frozen=True)
class TranslationRule:
    """
    One row of the translation table.

    - code:   fixed machine code, or None to use the exception's own `error_code`
    - detail: fixed client text, or None to use the exception's message
    - extensions: kind-specific extension entries (the code and path are added by the translator)
    """

    name: str
    matches: tuple[type[BaseException], ...]
    status: int
    title: str
    log_level: int
    code: str | None = None
    detail: str | None = None
    extensions: ExtensionsBuilder | None = None

    def applies_to(self, exc: BaseException) -> bool:
        return isinstance(exc, self.matches)

    @property
    def logs_traceback(self) -> bool:
        return self.log_level >= logging.ERROR


def _json_safe(value: Any) -> Any:
    return value if value is None or isinstance(value, (str, int, float, bool)) else str(value)


def _not_found_extensions(exc: EntityNotFoundError) -> dict[str, Any]:
    return {
        "entityType": exc.entity_type,
        "entityId": _json_safe(exc.entity_id),
    }


def _validation_extensions(exc: DomainValidationError) -> dict[str, Any]:
    return {
        "errors": {field: list(messages) for field, messages in exc.errors.items()},
        "targetType": exc.target_type,
    }


def _conflict_extensions(exc: ConflictError) -> dict[str, Any]:
    return {
        "field": exc.field,
        "value": _json_safe(exc.value),
    }


def _business_rule_extensions(exc: BusinessRuleViolationError) -> dict[str, Any]:
    return {
        "ruleName": exc.rule_name,
        "context": {str(key): _json_safe(value) for key, value in exc.context.items()},
    }


def _invalid_argument_extensions(exc: InvalidArgumentError) -> dict[str, Any]:
    return {"parameterName": exc.param_name}


NOT_FOUND_RULE = TranslationRule(
    "not_found", (EntityNotFoundError,), 404, "Resource Not Found", TRACE,
    extensions=_not_found_extensions,
)
VALIDATION_RULE = TranslationRule(
    "validation", (DomainValidationError,), 400, "Validation Failed", logging.WARNING,
    extensions=_validation_extensions,
)
CONFLICT_RULE = TranslationRule(
    "conflict", (ConflictError,), 409, "Resource Conflict", logging.WARNING,
    extensions=_conflict_extensions,
)
BUSINESS_RULE_RULE = TranslationRule(
    "business_rule", (BusinessRuleViolationError,), 400, "Business Logic Error", logging.WARNING,
    extensions=_business_rule_extensions,
)
DOMAIN_RULE = TranslationRule(
    "domain", (DomainError,), 400, "Business Logic Error", logging.WARNING,
)
INVALID_ARGUMENT_RULE = TranslationRule(
    "invalid_argument", (InvalidArgumentError,), 400, "Invalid Request Parameter", logging.WARNING,
    code="ARGUMENT_INVALID", extensions=_invalid_argument_extensions,
)
UNAUTHORIZED_RULE = TranslationRule(
    "unauthorized", (UnauthorizedError, PermissionError), 401, "Unauthorized", logging.WARNING,
    code="UNAUTHORIZED", detail=UNAUTHORIZED_DETAIL,
)
TIMEOUT_RULE = TranslationRule(
    "timeout", (OperationTimeoutError, TimeoutError), 408, "Request Timeout", logging.ERROR,
    code="TIMEOUT_ERROR", detail=TIMEOUT_DETAIL,
)
INTERNAL_RULE = TranslationRule(
    "internal", (ApplicationError, InfrastructureError), 500, "Internal Server Error", logging.ERROR,
    code="INTERNAL_ERROR", detail=INTERNAL_ERROR_DETAIL,
)
UNKNOWN_RULE = TranslationRule(
    "unknown", (BaseException,), 500, "Internal Server Error", logging.ERROR,
    code="UNKNOWN_ERROR", detail=UNKNOWN_ERROR_DETAIL,
)

TRANSLATION_RULES: tuple[TranslationRule, ...] = (
    NOT_FOUND_RULE,
    VALIDATION_RULE,
    CONFLICT_RULE,
    BUSINESS_RULE_RULE,
    DOMAIN_RULE,
    INVALID_ARGUMENT_RULE,
    UNAUTHORIZED_RULE,
    TIMEOUT_RULE,
    INTERNAL_RULE,
    UNKNOWN_RULE,
)


def match_rule(exc: BaseException, rules: tuple[TranslationRule, ...] = TRANSLATION_RULES) -> TranslationRule:
    """
    Return the first rule that applies to `exc`; UNKNOWN_RULE when none does.
    """
    for rule in rules:
        if rule.applies_to(exc):
            return rule
    return UNKNOWN_RULE


def classify(exc: BaseException) -> FailureKind:
    """
    Failure kind of any exception; stdlib PermissionError / TimeoutError map to their
    taxonomy counterparts and everything outside the taxonomy is UNKNOWN.
    """
    kind = getattr(exc, "kind", None)
    if isinstance(kind, FailureKind):
        return kind
    if isinstance(exc, PermissionError):
        return FailureKind.UNAUTHORIZED
    if isinstance(exc, TimeoutError):
        return FailureKind.TIMEOUT
    return FailureKind.UNKNOWN


def translate_exception(exc: BaseException, path: str | None = None,
                        rules: tuple[TranslationRule, ...] = TRANSLATION_RULES) -> ErrorResponse:
    """
    Build the client-facing ErrorResponse for `exc`.

    extensions always starts with `code`, followed by the rule's kind-specific entries,
    then `path` when given.
    """
    rule = match_rule(exc, rules)

    code = rule.code or getattr(exc, "error_code", None) or type(exc).__name__
    detail = rule.detail if rule.detail is not None else str(exc)

    extensions: dict[str, Any] = {"code": code}
    if rule.extensions is not None:
        extensions.update(rule.extensions(exc))
    if path:
        extensions["path"] = path

    return ErrorResponse(title=rule.title, status=rule.status, detail=detail, extensions=extensions)


__all__ = [
    "TranslationRule",
    "TRANSLATION_RULES",
    "INTERNAL_ERROR_DETAIL",
    "UNKNOWN_ERROR_DETAIL",
    "TIMEOUT_DETAIL",
    "UNAUTHORIZED_DETAIL",
    "match_rule",
    "classify",
    "translate_exception",
]
