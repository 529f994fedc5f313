# user_service/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # FailureKind, AppError, domain + argument errors
# │   ├── application.py             # ApplicationError, ServiceOperationError
# │   ├── infrastructure.py          # InfrastructureError, DatabaseError, RepositoryError, ...
# │   ├── validation.py              # ValidationErrorBuilder
# │   ├── translator.py              # ordered exception -> ErrorResponse rules
# │   ├── integrity_classifier.py    # SQL-level / DB-specific classification
# │   └── mapper.py                  # db_error_handler: SQLAlchemy errors -> taxonomy errors

from .base import (
    FailureKind,
    AppError,
    DomainError,
    EntityNotFoundError,
    UserNotFoundError,
    UserEmailNotFoundError,
    DomainValidationError,
    ConflictError,
    DuplicateUserEmailError,
    BusinessRuleViolationError,
    InvalidArgumentError,
    MissingArgumentError,
)
from .application import ApplicationError, ServiceOperationError
from .infrastructure import (
    InfrastructureError,
    DatabaseError,
    RepositoryError,
    UnauthorizedError,
    OperationTimeoutError,
)
from .validation import ValidationErrorBuilder
from .translator import TranslationRule, TRANSLATION_RULES, classify, match_rule, translate_exception

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
    "ApplicationError",
    "ServiceOperationError",
    "InfrastructureError",
    "DatabaseError",
    "RepositoryError",
    "UnauthorizedError",
    "OperationTimeoutError",
    "ValidationErrorBuilder",
    "TranslationRule",
    "TRANSLATION_RULES",
    "classify",
    "match_rule",
    "translate_exception",
]
