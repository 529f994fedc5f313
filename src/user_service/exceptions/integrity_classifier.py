import logging
from enum import Enum
from typing import Type

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint categories
# =================================================================================================================
# Internal labels describing *what* failed in the database. They are returned by
# classify_integrity_error() and never raised; mapper.py turns them into taxonomy errors.


class ConstraintViolation(Exception):
    """Base label for integrity/constraint violations."""


class UniqueConstraintViolation(ConstraintViolation):
    """Unique constraint / duplicate value."""


class NotNullConstraintViolation(ConstraintViolation):
    """NOT NULL violation (missing required field)."""


class ForeignKeyConstraintViolation(ConstraintViolation):
    """Foreign key constraint violated."""


class CheckConstraintViolation(ConstraintViolation):
    """CHECK constraint violated."""


class UnknownIntegrityViolation(ConstraintViolation):
    """Unrecognized integrity error."""


# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_VIOLATION_MAP: dict[str, Type[ConstraintViolation]] = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintViolation,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintViolation,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ForeignKeyConstraintViolation,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintViolation,
}


# =================================================================================================================
# Classifiers
# =================================================================================================================

def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _pgcode_of(orig) -> str | None:
    # psycopg exposes `pgcode`; SQLAlchemy's asyncpg adapter exposes `pgcode` or `sqlstate`
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name_of(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    return getattr(orig, "constraint_name", None)


def _classify_from_postgres_diag(orig) -> tuple[Type[ConstraintViolation] | None, str | None]:
    pgcode = _pgcode_of(orig)
    if not pgcode:
        return None, None

    constraint_name = _constraint_name_of(orig)
    violation = PGCODE_VIOLATION_MAP.get(pgcode)

    if violation:
        logger.debug("Postgres integrity diagnostic", extra={"pgcode": pgcode, "constraint_name": constraint_name})
        return violation, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    logger.debug("Postgres orig diagnostic (raw)", extra={"orig_repr": repr(orig)})
    return UnknownIntegrityViolation, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolation], None]:
    """
    Message heuristics for drivers without SQLSTATE codes (SQLite, MySQL).
    """
    normalized = msg.lower()

    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return UniqueConstraintViolation, None

    if _match_any(normalized, ["not null constraint", "not null", "null value in column"]):
        return NotNullConstraintViolation, None

    if _match_any(normalized, ["foreign key constraint", "foreign key", "is not present in table"]):
        return ForeignKeyConstraintViolation, None

    if _match_any(normalized, ["check constraint", "check failed"]):
        return CheckConstraintViolation, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": (msg or "")[:200]})
    logger.debug("Unknown integrity raw message", extra={"raw": msg})
    return UnknownIntegrityViolation, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolation], str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolation label.

    Postgres SQLSTATE codes are preferred; message heuristics are the fallback.

    Returns:
        (violation label, constraint name if the driver reported one)
    """
    orig = exc.orig

    violation, constraint_name = _classify_from_postgres_diag(orig)
    if violation is not None:
        return violation, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))


__all__ = [
    "ConstraintViolation",
    "UniqueConstraintViolation",
    "NotNullConstraintViolation",
    "ForeignKeyConstraintViolation",
    "CheckConstraintViolation",
    "UnknownIntegrityViolation",
    "classify_integrity_error",
]
