"""API endpoints for the patient records service."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app import __version__
from app.models.health import HealthResponse
from app.models.patient import PatientCreateRequest, PatientUpdateRequest, PatientView
from app.services.patients import PatientService
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_patient_service(request: Request) -> PatientService:
    """Return the service instance the application was built with."""
    return request.app.state.patient_service


PatientServiceDep = Annotated[PatientService, Depends(get_patient_service)]


@router.get("/patients", response_model=list[PatientView], tags=["Patient Management"])
async def get_patients(service: PatientServiceDep) -> list[PatientView]:
    """Retrieve a list of all registered patients."""
    return await service.list_patients()


@router.post("/patients", response_model=PatientView, tags=["Patient Management"])
async def create_patient(request: PatientCreateRequest, service: PatientServiceDep) -> PatientView:
    """Register a new patient in the system."""
    logger.info(f"Creating patient with email {request.email}")
    return await service.create_patient(request)


@router.put("/patients/{patient_id}", response_model=PatientView, tags=["Patient Management"])
async def update_patient(patient_id: str, request: PatientUpdateRequest, service: PatientServiceDep) -> PatientView:
    """Update the details of an existing patient."""
    logger.info(f"Updating patient {patient_id}")
    return await service.update_patient(patient_id, request)


@router.delete("/patients/{patient_id}", status_code=204, tags=["Patient Management"])
async def delete_patient(patient_id: str, service: PatientServiceDep) -> Response:
    """Remove a patient from the system."""
    logger.info(f"Deleting patient {patient_id}")
    await service.delete_patient(patient_id)
    return Response(status_code=204)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: PatientServiceDep) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
        store=type(service.store).__name__,
    )
