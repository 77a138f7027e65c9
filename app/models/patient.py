"""Patient data models."""

from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass
class Patient:
    """Persisted patient record.

    The identifier is assigned by the store on first save.
    """

    id: str | None
    name: str
    email: str
    address: str
    date_of_birth: date
    registered_date: date


class PatientRequest(BaseModel):
    """Wire shape shared by create and update requests.

    Fields are left unconstrained here; missing values decode to None and are
    reported by the service's field validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    email: str | None = None
    address: str | None = None
    date_of_birth: str | None = None
    registered_date: str | None = None


class PatientCreateRequest(PatientRequest):
    """Request model for registering a new patient."""


class PatientUpdateRequest(PatientRequest):
    """Request model for replacing an existing patient's details."""


class PatientView(BaseModel):
    """Response model exposed to clients.

    Address and registered date are intentionally left out.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    date_of_birth: str
