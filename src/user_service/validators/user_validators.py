import re

# Pragmatic check: one "@", no whitespace, a dot in the domain part.
# Full RFC 5322 parsing is not the goal; the unique constraint protects the rest.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: str | None) -> bool:
    """
    Return True when `value` looks like a deliverable address (`local@domain.tld`).
    """
    if not value:
        return False
    return _EMAIL_RE.match(value.strip()) is not None


def normalize_email(value: str) -> str:
    """
    Strip whitespace and lowercase, so lookups and the unique index agree.
    """
    return value.strip().lower()
