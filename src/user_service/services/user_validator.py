"""
Field-level validation for User data.

All rules are checked before raising so the client receives every problem at once:

    {"Name": ["Name is required and cannot be empty."], "Email": ["Email format is invalid."]}
"""

from datetime import date

from user_service.exceptions.validation import ValidationErrorBuilder
from user_service.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from user_service.validators.user_validators import is_valid_email

MAX_AGE_YEARS = 130


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 on a non-leap target year
        return today.replace(year=today.year - years, day=28)


def validate_user(name: str | None, email: str | None, date_of_birth: date | None = None,
                  *, today: date | None = None) -> None:
    """
    Raise DomainValidationError(target_type="User") when any rule fails.

    Args:
        today: reference date for the date-of-birth rules; defaults to date.today()
    """
    today = today or date.today()
    builder = ValidationErrorBuilder("User")

    if name is None or not name.strip():
        builder.add("Name", "Name is required and cannot be empty.")
    elif len(name.strip()) > NAME_MAX_LENGTH:
        builder.add("Name", f"Name cannot exceed {NAME_MAX_LENGTH} characters.")

    if email is None or not email.strip():
        builder.add("Email", "Email is required and cannot be empty.")
    elif len(email.strip()) > EMAIL_MAX_LENGTH:
        builder.add("Email", f"Email cannot exceed {EMAIL_MAX_LENGTH} characters.")
    elif not is_valid_email(email):
        builder.add("Email", "Email format is invalid.")

    if date_of_birth is not None:
        if date_of_birth > today:
            builder.add("DateOfBirth", "Date of birth cannot be in the future.")
        elif date_of_birth < _years_ago(today, MAX_AGE_YEARS):
            builder.add("DateOfBirth", f"Date of birth cannot be more than {MAX_AGE_YEARS} years ago.")

    builder.raise_if_any()
