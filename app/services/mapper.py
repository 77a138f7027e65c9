"""Translation between wire shapes and the persisted patient record.

Pure functions: no I/O, no business rules.
"""

import re
from datetime import date

from app.models.patient import Patient, PatientRequest, PatientView
from app.services.errors import InvalidDateFormatError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str, field: str) -> date:
    """Parse a strict YYYY-MM-DD string into a date.

    Raises:
        InvalidDateFormatError: If the string is not a real calendar date
    """
    if not ISO_DATE_PATTERN.match(value):
        raise InvalidDateFormatError(field, value)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateFormatError(field, value) from e


def to_view(patient: Patient) -> PatientView:
    """Project a stored patient onto the client-facing view."""
    return PatientView(
        id=patient.id,
        name=patient.name,
        email=patient.email,
        date_of_birth=patient.date_of_birth.isoformat(),
    )


def to_record(request: PatientRequest) -> Patient:
    """Build an unsaved patient record from a validated request."""
    return Patient(
        id=None,
        name=request.name,
        email=request.email,
        address=request.address,
        date_of_birth=parse_iso_date(request.date_of_birth, "dateOfBirth"),
        registered_date=parse_iso_date(request.registered_date, "registeredDate"),
    )
