"""Integration tests for meeting code API."""
import pytest
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

from attendance.core.config import settings
from tests.utils import in_future, meeting_payload

CODES = "/api/v1/attendance/meeting_code"


def create_meeting(client, auth_headers, directory, start, participant_ids=()):
    response = client.post(
        "/api/v1/attendance/meeting/",
        json=meeting_payload(directory.course_id, start, participant_ids=list(participant_ids)),
        headers=auth_headers(directory.alice),
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def running_meeting(client, auth_headers, directory):
    """A meeting that started a few minutes ago, Bob is a participant."""
    start = datetime.now(timezone.utc).replace(microsecond=0) - timedelta(minutes=5)
    return create_meeting(client, auth_headers, directory, start, [directory.bob])


@pytest.mark.integration
class TestIssueAndFetch:

    def test_issue_new_code(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        response = client.post(f"{CODES}/{meeting_id}", headers=auth_headers(directory.alice))

        assert response.status_code == 201
        data = response.json()
        assert data["meeting_id"] == meeting_id
        assert data["valid_start"] == running_meeting["meeting"]["start_time"]
        assert data["valid_end"] == running_meeting["meeting"]["end_time"]

        encoded = parse_qs(urlparse(data["qr_url"]).query)["data"][0]
        assert encoded == f"{settings.PUBLIC_BASE_URL}/attendance/record/{meeting_id}/{data['code']}"

    def test_current_code_is_latest(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        issued = client.post(f"{CODES}/{meeting_id}", headers=auth_headers(directory.alice)).json()

        response = client.get(f"{CODES}/{meeting_id}", headers=auth_headers(directory.alice))
        assert response.status_code == 200
        assert response.json()["code"] == issued["code"]

    def test_participants_cannot_see_code(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        response = client.get(f"{CODES}/{meeting_id}", headers=auth_headers(directory.bob))
        assert response.status_code == 403

    def test_qr_image(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        response = client.get(f"{CODES}/{meeting_id}/qr", headers=auth_headers(directory.alice))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert b"<svg" in response.content


@pytest.mark.integration
class TestRedeem:

    def test_redeem_marks_present(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        code = running_meeting["meeting_code"]["code"]

        response = client.get(f"{CODES}/record/{meeting_id}/{code.lower()}", headers=auth_headers(directory.bob))

        assert response.status_code == 200
        assert response.json()["present"] is True
        assert response.json()["participant_id"] == directory.bob

    def test_redeem_before_meeting_starts(self, client, auth_headers, directory):
        upcoming = create_meeting(client, auth_headers, directory, in_future(), [directory.bob])
        meeting_id = upcoming["meeting"]["id"]
        code = upcoming["meeting_code"]["code"]

        response = client.get(f"{CODES}/record/{meeting_id}/{code}", headers=auth_headers(directory.bob))
        assert response.status_code == 403

        record = client.get(
            f"/api/v1/attendance/participant/{meeting_id}/{directory.bob}", headers=auth_headers(directory.bob)
        )
        assert record.json()["present"] is False

    def test_non_participant_cannot_redeem(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        code = running_meeting["meeting_code"]["code"]

        response = client.get(f"{CODES}/record/{meeting_id}/{code}", headers=auth_headers(directory.carol))
        assert response.status_code == 403

    def test_wrong_code(self, client, auth_headers, directory, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        response = client.get(f"{CODES}/record/{meeting_id}/WRONG99X", headers=auth_headers(directory.bob))
        assert response.status_code == 404

    def test_requires_authentication(self, client, running_meeting):
        meeting_id = running_meeting["meeting"]["id"]
        code = running_meeting["meeting_code"]["code"]
        response = client.get(f"{CODES}/record/{meeting_id}/{code}")
        assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.rate_limit
class TestRateLimiting:

    def test_issue_code_rate_limit(self, client, auth_headers, directory, running_meeting):
        """Issuing codes is limited to 30 per minute."""
        meeting_id = running_meeting["meeting"]["id"]
        headers = auth_headers(directory.alice)

        for i in range(30):
            response = client.post(f"{CODES}/{meeting_id}", headers=headers)
            assert response.status_code == 201, f"Request {i+1} should succeed under 30/min limit"

        response = client.post(f"{CODES}/{meeting_id}", headers=headers)
        assert response.status_code == 429
