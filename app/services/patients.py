"""Patient service: field validation, uniqueness and existence checks around the store."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace

from app.models.patient import Patient, PatientCreateRequest, PatientUpdateRequest, PatientView
from app.services.errors import (
    EmailAlreadyExistsError,
    PatientNotFoundError,
    StoreUnavailableError,
    ValidationFailedError,
)
from app.services.mapper import to_record, to_view
from app.services.store import DuplicateEmailError, PatientMissingError, PatientStore, StoreError
from app.services.validation import validate_patient_request
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PatientService:
    """Service for creating, listing, updating and deleting patients.

    Every precondition (field validation, email uniqueness, existence) is
    checked before the store is asked to write, so a rejected request never
    leaves a partial write behind. The store's own unique index still backs
    the uniqueness check when two writers race on the same email.
    """

    def __init__(self, store: PatientStore):
        """Initialize with the store this service will use for its lifetime."""
        self.store = store

    async def list_patients(self) -> list[PatientView]:
        """Return a view of every patient, in the order the store yields them."""
        async with self._store_access("find_all"):
            patients = await self.store.find_all()
        return [to_view(patient) for patient in patients]

    async def create_patient(self, request: PatientCreateRequest) -> PatientView:
        """Register a new patient.

        Raises:
            ValidationFailedError: If any field is blank or malformed
            EmailAlreadyExistsError: If the email is already registered
            InvalidDateFormatError: If a date is not YYYY-MM-DD
            StoreUnavailableError: On store failure
        """
        self._validate(request)

        async with self._store_access("exists_by_email"):
            email_taken = await self.store.exists_by_email(request.email)
        if email_taken:
            logger.warning(f"Rejected new patient, email already registered: {request.email}")
            raise EmailAlreadyExistsError(request.email)

        record = to_record(request)

        async with self._store_access("save"):
            saved = await self.store.save(record)

        logger.info(f"Created patient {saved.id}")
        return to_view(saved)

    async def update_patient(self, patient_id: str, request: PatientUpdateRequest) -> PatientView:
        """Replace every mutable field of an existing patient.

        The uniqueness check is skipped when the email is unchanged, so a
        patient never collides with their own record.

        Raises:
            ValidationFailedError: If any field is blank or malformed
            PatientNotFoundError: If no patient has this identifier
            EmailAlreadyExistsError: If another patient uses the new email
            InvalidDateFormatError: If a date is not YYYY-MM-DD
            StoreUnavailableError: On store failure
        """
        self._validate(request)
        patient = await self._get_existing(patient_id)

        if request.email != patient.email:
            async with self._store_access("exists_by_email"):
                email_taken = await self.store.exists_by_email(request.email)
            if email_taken:
                logger.warning(f"Rejected update of patient {patient_id}, email already registered: {request.email}")
                raise EmailAlreadyExistsError(request.email)

        updated = replace(to_record(request), id=patient.id)

        async with self._store_access("save"):
            saved = await self.store.save(updated)

        logger.info(f"Updated patient {saved.id}")
        return to_view(saved)

    async def delete_patient(self, patient_id: str) -> None:
        """Remove an existing patient.

        Raises:
            PatientNotFoundError: If no patient has this identifier
            StoreUnavailableError: On store failure
        """
        patient = await self._get_existing(patient_id)

        async with self._store_access("delete"):
            await self.store.delete(patient)

        logger.info(f"Deleted patient {patient_id}")

    def _validate(self, request: PatientCreateRequest | PatientUpdateRequest) -> None:
        errors = validate_patient_request(request)
        if errors:
            logger.warning(f"Patient request failed validation: {errors}")
            raise ValidationFailedError(errors)

    async def _get_existing(self, patient_id: str) -> Patient:
        async with self._store_access("find_by_id"):
            patient = await self.store.find_by_id(patient_id)
        if patient is None:
            logger.warning(f"Patient not found: {patient_id}")
            raise PatientNotFoundError(patient_id)
        return patient

    @asynccontextmanager
    async def _store_access(self, operation: str) -> AsyncIterator[None]:
        """Translate store failures into domain errors."""
        try:
            yield
        except DuplicateEmailError as e:
            logger.warning(f"Store rejected duplicate email during {operation}: {e.email}")
            raise EmailAlreadyExistsError(e.email) from e
        except PatientMissingError as e:
            logger.warning(f"Patient {e.patient_id} was removed before {operation} completed")
            raise PatientNotFoundError(e.patient_id) from e
        except StoreError as e:
            logger.error(f"Patient store failed during {operation}: {e}", exc_info=True)
            raise StoreUnavailableError(operation) from e
