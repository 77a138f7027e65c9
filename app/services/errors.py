"""Domain errors raised by the patient service.

Every error carries an ``ErrorKind`` so the transport layer can choose a status
code and body without inspecting exception types.
"""

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Kinds of failures the patient service reports."""

    VALIDATION_FAILED = "validation_failed"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    PATIENT_NOT_FOUND = "patient_not_found"
    INVALID_DATE_FORMAT = "invalid_date_format"
    STORE_UNAVAILABLE = "store_unavailable"


class PatientServiceError(Exception):
    """Base class for patient service errors."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(PatientServiceError):
    """Raised when one or more request fields fail validation."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, errors: dict[str, str]):
        super().__init__(f"Validation failed for: {', '.join(errors)}")
        self.errors = errors


class EmailAlreadyExistsError(PatientServiceError):
    """Raised when another patient already uses the requested email."""

    kind = ErrorKind.EMAIL_ALREADY_EXISTS

    def __init__(self, email: str):
        super().__init__(f"A patient with this email already exists: {email}")
        self.email = email


class PatientNotFoundError(PatientServiceError):
    """Raised when no patient matches the given identifier."""

    kind = ErrorKind.PATIENT_NOT_FOUND

    def __init__(self, patient_id: str):
        super().__init__(f"Patient not found with id: {patient_id}")
        self.patient_id = patient_id


class InvalidDateFormatError(PatientServiceError):
    """Raised when a date field is not an ISO calendar date (YYYY-MM-DD)."""

    kind = ErrorKind.INVALID_DATE_FORMAT

    def __init__(self, field: str, value: str):
        super().__init__(f"Invalid date '{value}', expected format YYYY-MM-DD")
        self.field = field
        self.value = value


class StoreUnavailableError(PatientServiceError):
    """Raised when the patient store fails for infrastructure reasons."""

    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, operation: str):
        super().__init__("Patient store is currently unavailable")
        self.operation = operation
