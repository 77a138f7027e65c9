"""Field-level validation for patient requests."""

import email_validator
from email_validator import EmailNotValidError, validate_email

from app.models.patient import PatientRequest

NAME_MAX_LENGTH = 100

# Only syntax is checked: intranet domains like clinic.local or localhost are accepted
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_valid_email(value: str) -> bool:
    try:
        validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            allow_quoted_local=True,
        )
    except EmailNotValidError:
        return False
    return True


def validate_patient_request(request: PatientRequest) -> dict[str, str]:
    """Check every field of a create or update request.

    All fields are checked; a field contributes at most one message.

    Args:
        request: Decoded request body

    Returns:
        Mapping of wire field name to message, empty when the request is valid
    """
    errors: dict[str, str] = {}

    if _is_blank(request.name):
        errors["name"] = "Name cannot be blank"
    elif len(request.name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name cannot exceed {NAME_MAX_LENGTH} characters"

    if _is_blank(request.email):
        errors["email"] = "Email cannot be blank"
    elif not _is_valid_email(request.email):
        errors["email"] = "Email should be valid"

    if _is_blank(request.address):
        errors["address"] = "Address cannot be blank"

    if _is_blank(request.date_of_birth):
        errors["dateOfBirth"] = "Date of Birth cannot be blank"

    if _is_blank(request.registered_date):
        errors["registeredDate"] = "Registered Date cannot be blank"

    return errors
