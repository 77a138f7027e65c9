"""Tests for API endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.patients import PatientService
from app.services.store import InMemoryPatientStore, StoreError

JANE = {
    "name": "Jane Doe",
    "email": "jane@x.com",
    "address": "1 Main St",
    "dateOfBirth": "1990-01-01",
    "registeredDate": "2024-01-01",
}


@pytest.fixture
def client():
    """Client for an app backed by a fresh in-memory store."""
    app = create_app(PatientService(InMemoryPatientStore()))
    with TestClient(app) as test_client:
        yield test_client


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check_returns_200(self, client):
        """Test that health check returns 200 status."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_check_response_structure(self, client):
        """Test that health check returns expected JSON structure."""
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["store"] == "InMemoryPatientStore"
        assert "timestamp" in data


class TestCreatePatientEndpoint:
    """Tests for POST /patients."""

    def test_create_returns_view(self, client):
        """Test that a valid request returns the camelCase view."""
        response = client.post("/patients", json=JANE)
        assert response.status_code == 200
        data = response.json()

        assert set(data) == {"id", "name", "email", "dateOfBirth"}
        assert data["name"] == "Jane Doe"
        assert data["email"] == "jane@x.com"
        assert data["dateOfBirth"] == "1990-01-01"
        assert data["id"]

    def test_duplicate_email(self, client):
        """Test that a second patient with the same email is refused."""
        client.post("/patients", json=JANE)
        response = client.post("/patients", json=JANE)

        assert response.status_code == 409
        assert response.json() == {"message": "A patient with this email already exists: jane@x.com"}
        assert len(client.get("/patients").json()) == 1

    def test_validation_errors_by_field(self, client):
        """Test that field failures render as a field to message map."""
        response = client.post("/patients", json={**JANE, "name": "", "email": "nope", "address": " "})

        assert response.status_code == 400
        assert response.json() == {
            "name": "Name cannot be blank",
            "email": "Email should be valid",
            "address": "Address cannot be blank",
        }

    def test_missing_fields(self, client):
        """Test that an empty body reports every field."""
        response = client.post("/patients", json={})
        assert response.status_code == 400
        assert set(response.json()) == {"name", "email", "address", "dateOfBirth", "registeredDate"}

    def test_invalid_date(self, client):
        """Test that a malformed date names the offending field."""
        response = client.post("/patients", json={**JANE, "dateOfBirth": "01-01-1990"})

        assert response.status_code == 400
        assert response.json() == {"dateOfBirth": "Invalid date '01-01-1990', expected format YYYY-MM-DD"}

    def test_wrong_type_is_422(self, client):
        """Test that undecodable bodies keep FastAPI's validation response."""
        response = client.post("/patients", json={**JANE, "name": 42})
        assert response.status_code == 422


class TestListPatientsEndpoint:
    """Tests for GET /patients."""

    def test_empty_list(self, client):
        """Test listing with no patients."""
        response = client.get("/patients")
        assert response.status_code == 200
        assert response.json() == []

    def test_lists_created_patients(self, client):
        """Test that created patients are listed in creation order."""
        jane = client.post("/patients", json=JANE).json()
        john = client.post("/patients", json={**JANE, "name": "John Smith", "email": "john@x.com"}).json()

        assert client.get("/patients").json() == [jane, john]

    def test_store_unavailable(self):
        """Test that store faults render as 503 with a message."""
        store = AsyncMock()
        store.find_all.side_effect = StoreError("connection refused")
        with TestClient(create_app(PatientService(store))) as client:
            response = client.get("/patients")

        assert response.status_code == 503
        assert response.json() == {"message": "Patient store is currently unavailable"}


class TestUpdatePatientEndpoint:
    """Tests for PUT /patients/{patient_id}."""

    def test_update(self, client):
        """Test that an update returns the new values."""
        created = client.post("/patients", json=JANE).json()
        response = client.put(
            f"/patients/{created['id']}",
            json={**JANE, "name": "Jane D.", "email": "jane.d@x.com", "dateOfBirth": "1991-02-03"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "name": "Jane D.",
            "email": "jane.d@x.com",
            "dateOfBirth": "1991-02-03",
        }
        assert client.get("/patients").json() == [response.json()]

    def test_update_same_email(self, client):
        """Test that keeping the current email is allowed."""
        created = client.post("/patients", json=JANE).json()
        response = client.put(f"/patients/{created['id']}", json={**JANE, "name": "Jane D."})

        assert response.status_code == 200
        assert response.json()["name"] == "Jane D."

    def test_update_to_taken_email(self, client):
        """Test that another patient's email is refused."""
        created = client.post("/patients", json=JANE).json()
        client.post("/patients", json={**JANE, "email": "john@x.com"})
        response = client.put(f"/patients/{created['id']}", json={**JANE, "email": "john@x.com"})

        assert response.status_code == 409
        assert "john@x.com" in response.json()["message"]

    def test_update_unknown_id(self, client):
        """Test that updating a missing patient is 404."""
        response = client.put("/patients/missing", json=JANE)

        assert response.status_code == 404
        assert response.json() == {"message": "Patient not found with id: missing"}


class TestDeletePatientEndpoint:
    """Tests for DELETE /patients/{patient_id}."""

    def test_delete_twice(self, client):
        """Test that delete returns no content, then not found."""
        created = client.post("/patients", json=JANE).json()

        first = client.delete(f"/patients/{created['id']}")
        assert first.status_code == 204
        assert first.content == b""

        second = client.delete(f"/patients/{created['id']}")
        assert second.status_code == 404
        assert client.get("/patients").json() == []


class TestAPIDocumentation:
    """Tests for API documentation endpoints."""

    def test_openapi_json_available(self, client):
        """Test that OpenAPI JSON specification is available."""
        response = client.get("/openapi.json")
        assert response.status_code == 200
        assert "/patients" in response.json()["paths"]

    def test_swagger_ui_available(self, client):
        """Test that Swagger UI is available."""
        response = client.get("/docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
