"""Integration tests for application-level behaviour."""
import pytest
from unittest.mock import Mock

from sqlalchemy.exc import OperationalError

from attendance.api.deps import get_db
from attendance.main import app


@pytest.mark.integration
class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"]["status"] == "connected"
        assert "X-Request-ID" in response.headers

    def test_health_database_down(self, client):
        broken = Mock()
        broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        def override_get_db():
            yield broken

        app.dependency_overrides[get_db] = override_get_db
        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


@pytest.mark.integration
class TestErrorFormat:

    def test_request_validation_is_400(self, client, auth_headers, directory):
        response = client.patch(
            "/api/v1/attendance/participant/",
            json={"meeting_id": "m-1", "participant_id": directory.bob, "present": "maybe"},
            headers=auth_headers(directory.alice),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "validation_error"
        assert "present" in body["error"]["message"]

    def test_invalid_token(self, client):
        response = client.get(
            "/api/v1/attendance/meeting/some-id",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_error_envelope_is_documented(self, client):
        schema = client.get("/openapi.json").json()
        responses = schema["paths"]["/api/v1/attendance/meeting/{meeting_id}"]["delete"]["responses"]

        for status_code in ("400", "403", "404", "409"):
            ref = responses[status_code]["content"]["application/json"]["schema"]["$ref"]
            assert ref.endswith("/ErrorResponse")
        assert "success" in schema["components"]["schemas"]["ErrorResponse"]["properties"]
