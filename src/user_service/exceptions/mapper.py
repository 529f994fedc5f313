import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintViolation,
    NotNullConstraintViolation,
    ForeignKeyConstraintViolation,
    CheckConstraintViolation,
)
from .base import ConflictError
from .infrastructure import DatabaseError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Common Postgres messages:
      - 'null value in column "name" violates not-null constraint'
      - 'DETAIL:  Key (email)=(a@b.com) already exists.'
    """
    if not msg:
        return None

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: users.email' / 'NOT NULL constraint failed: users.name'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>[\w., ]+)', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols").strip())]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the driver message (Postgres, SQLite).
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)

    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, model_name: str | None = None,
                        operation: str | None = None) -> ConflictError | DatabaseError:
    """
    Translate a SQLAlchemy IntegrityError into a taxonomy error (returned, not raised).

    - unique violation         -> ConflictError (client-caused, 409)
    - any other integrity case -> DatabaseError with a safe message; raw text only in `details`
    """
    violation, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"
    op = operation or "Write"
    raw = str(exc.orig) if exc.orig is not None else str(exc)

    if violation is UniqueConstraintViolation:
        # Expected client-level scenario; INFO is enough.
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint_name},
        )
        field = ", ".join(columns) if columns else constraint_name
        if field:
            return ConflictError(field=field, message=f"{model_part} already exists for field(s): {field}")
        return ConflictError(message=f"{model_part} already exists.")

    if violation is NotNullConstraintViolation:
        message = (
            f"Missing required field(s): {', '.join(columns)} for {model_part}" if columns
            else f"Missing required field for {model_part}"
        )
        event = "mapper.not_null_violation"
    elif violation is ForeignKeyConstraintViolation:
        message = f"{model_part} references an entity that does not exist"
        event = "mapper.foreign_key_violation"
    elif violation is CheckConstraintViolation:
        message = f"{model_part} violates a check constraint"
        event = "mapper.check_constraint_failure"
    else:
        message = f"{model_part} database integrity error"
        event = "mapper.unknown_integrity_error"

    logger.warning(event, extra={"model": model_part, "fields": columns, "constraint": constraint_name})
    logger.debug("mapper.integrity_raw", extra={"model": model_part, "raw": raw})

    return DatabaseError(op, message, table_name=model_name, details=raw)


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None, operation: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, "User", "add"):
            ... DB ops that may raise SQLAlchemy errors ...

    Rolls back on any SQLAlchemy error and raises a taxonomy error instead:
    IntegrityError -> ConflictError / DatabaseError, other SQLAlchemyError -> DatabaseError.
    Everything else (including taxonomy errors raised inside the block) propagates unchanged.
    """
    try:
        yield
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise map_integrity_error(exc, model_name, operation) from exc
    except SQLAlchemyError as exc:
        await _safe_rollback(db, model_name)
        logger.warning(
            "mapper.database_error",
            extra={"model": model_name, "operation": operation, "error_type": type(exc).__name__},
        )
        raise DatabaseError(
            operation or "Unknown",
            f"Failed to operate on {model_name or 'database'}",
            table_name=model_name,
            details=str(exc),
        ) from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        # The original error is what the caller needs; keep the rollback failure in logs.
        logger.exception("Failed to rollback session", extra={"model": model_name})
