"""
Incremental collection of validation failures.

    builder = ValidationErrorBuilder("User")
    if not name.strip():
        builder.add("Name", "Name is required and cannot be empty.")
    builder.raise_if_any()

The builder is a plain mutable collector; the DomainValidationError it builds is frozen.
"""

from typing import Iterable

from .base import DomainValidationError


class ValidationErrorBuilder:
    def __init__(self, target_type: str | None = None):
        self.target_type = target_type
        self._errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> "ValidationErrorBuilder":
        self._errors.setdefault(field, []).append(message)
        return self

    def extend(self, field: str, messages: Iterable[str]) -> "ValidationErrorBuilder":
        for message in messages:
            self.add(field, message)
        return self

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def messages_for(self, field: str) -> tuple[str, ...]:
        return tuple(self._errors.get(field, ()))

    def build(self) -> DomainValidationError:
        """
        Freeze the collected violations. Raises ValueError when nothing was collected.
        """
        return DomainValidationError(self._errors, self.target_type)

    def raise_if_any(self) -> None:
        if self._errors:
            raise self.build()


__all__ = ["ValidationErrorBuilder"]
