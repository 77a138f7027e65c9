"""Patient store interface and in-memory implementation."""

from dataclasses import replace
from typing import Protocol

from cuid2 import cuid_wrapper

from app.models.patient import Patient
from app.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()


class StoreError(Exception):
    """Infrastructure failure inside a patient store."""


class PatientMissingError(StoreError):
    """Raised by a store when overwriting a patient that is no longer stored."""

    def __init__(self, patient_id: str):
        super().__init__(f"Patient no longer stored: {patient_id}")
        self.patient_id = patient_id


class DuplicateEmailError(StoreError):
    """Raised by a store when a save would break email uniqueness."""

    def __init__(self, email: str):
        super().__init__(f"Email already stored: {email}")
        self.email = email


class PatientStore(Protocol):
    """Interface for patient persistence.

    Implementations own identifier generation and must enforce email
    uniqueness on save, raising DuplicateEmailError on conflict.
    """

    async def open(self) -> None:
        """Prepare the store for use (create schema, connect)."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""
        ...

    async def find_all(self) -> list[Patient]:
        """Return every stored patient."""
        ...

    async def find_by_id(self, patient_id: str) -> Patient | None:
        """Return the patient with this identifier, or None."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether any stored patient uses this email."""
        ...

    async def save(self, patient: Patient) -> Patient:
        """Insert or overwrite a patient.

        Args:
            patient: Record to persist; an identifier is assigned when absent

        Returns:
            The stored record, including its identifier

        Raises:
            DuplicateEmailError: If another patient already uses the email
            PatientMissingError: If the record has an id that is not stored
            StoreError: On any other persistence failure
        """
        ...

    async def delete(self, patient: Patient) -> None:
        """Remove a patient."""
        ...


class InMemoryPatientStore:
    """In-memory patient store.

    Keeps records in insertion order and hands out copies, so callers can
    modify a returned record without touching stored state until save.
    """

    def __init__(self):
        self.patients: dict[str, Patient] = {}

    async def open(self) -> None:
        logger.info("Using in-memory patient store")

    async def close(self) -> None:
        pass

    async def find_all(self) -> list[Patient]:
        return [replace(patient) for patient in self.patients.values()]

    async def find_by_id(self, patient_id: str) -> Patient | None:
        patient = self.patients.get(patient_id)
        return replace(patient) if patient else None

    async def exists_by_email(self, email: str) -> bool:
        return any(patient.email == email for patient in self.patients.values())

    async def save(self, patient: Patient) -> Patient:
        if patient.id is not None and patient.id not in self.patients:
            raise PatientMissingError(patient.id)

        for stored in self.patients.values():
            if stored.email == patient.email and stored.id != patient.id:
                raise DuplicateEmailError(patient.email)

        stored = replace(patient, id=patient.id or cuid())
        self.patients[stored.id] = stored
        return replace(stored)

    async def delete(self, patient: Patient) -> None:
        self.patients.pop(patient.id, None)
