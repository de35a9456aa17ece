"""Integration tests for participants API."""
import pytest

from tests.utils import in_future, meeting_payload

PARTICIPANTS = "/api/v1/attendance/participant"


@pytest.fixture
def meeting(client, auth_headers, directory):
    """Alice's upcoming meeting with Bob."""
    response = client.post(
        "/api/v1/attendance/meeting/",
        json=meeting_payload(directory.course_id, in_future(), participant_ids=[directory.bob]),
        headers=auth_headers(directory.alice),
    )
    assert response.status_code == 201
    return response.json()["meeting"]


@pytest.mark.integration
class TestAddParticipants:

    def test_bulk_add(self, client, auth_headers, directory, meeting):
        response = client.post(
            f"{PARTICIPANTS}/",
            json={"participants": [
                {"meeting_id": meeting["id"], "participant_id": directory.carol},
                {"meeting_id": meeting["id"], "participant_id": directory.bob},
            ]},
            headers=auth_headers(directory.alice),
        )

        assert response.status_code == 201
        assert {p["participant_id"] for p in response.json()} == {directory.carol, directory.bob}

    def test_repeated_add_is_idempotent(self, client, auth_headers, directory, meeting):
        body = {"participants": [{"meeting_id": meeting["id"], "participant_id": directory.carol}]}
        for _ in range(2):
            response = client.post(f"{PARTICIPANTS}/", json=body, headers=auth_headers(directory.alice))
            assert response.status_code == 201

        listing = client.post(
            f"{PARTICIPANTS}/list/", json={"meeting_id": meeting["id"]}, headers=auth_headers(directory.alice)
        )
        assert sorted(p["participant_id"] for p in listing.json()) == sorted(
            [directory.alice, directory.bob, directory.carol]
        )

    def test_unknown_user(self, client, auth_headers, directory, meeting):
        response = client.post(
            f"{PARTICIPANTS}/",
            json={"participants": [{"meeting_id": meeting["id"], "participant_id": "ghost"}]},
            headers=auth_headers(directory.alice),
        )
        assert response.status_code == 404

    def test_empty_batch(self, client, auth_headers, directory):
        response = client.post(f"{PARTICIPANTS}/", json={"participants": []}, headers=auth_headers(directory.alice))
        assert response.status_code == 400

    def test_non_creator(self, client, auth_headers, directory, meeting):
        response = client.post(
            f"{PARTICIPANTS}/",
            json={"participants": [{"meeting_id": meeting["id"], "participant_id": directory.carol}]},
            headers=auth_headers(directory.bob),
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestParticipantRecord:

    def test_get_own_record(self, client, auth_headers, directory, meeting):
        response = client.get(f"{PARTICIPANTS}/{meeting['id']}/{directory.bob}", headers=auth_headers(directory.bob))
        assert response.status_code == 200
        assert response.json()["present"] is False

    def test_mark_present_and_absent(self, client, auth_headers, directory, meeting):
        response = client.patch(
            f"{PARTICIPANTS}/",
            json={"meeting_id": meeting["id"], "participant_id": directory.bob, "present": True},
            headers=auth_headers(directory.alice),
        )
        assert response.status_code == 200
        assert response.json()["present"] is True
        assert response.json()["attendance_time"] is not None

        response = client.patch(
            f"{PARTICIPANTS}/",
            json={"meeting_id": meeting["id"], "participant_id": directory.bob, "present": False},
            headers=auth_headers(directory.alice),
        )
        assert response.json()["present"] is False
        assert response.json()["attendance_time"] is None

    def test_participant_cannot_mark_self(self, client, auth_headers, directory, meeting):
        response = client.patch(
            f"{PARTICIPANTS}/",
            json={"meeting_id": meeting["id"], "participant_id": directory.bob, "present": True},
            headers=auth_headers(directory.bob),
        )
        assert response.status_code == 403

    def test_remove_participant(self, client, auth_headers, directory, meeting):
        response = client.delete(f"{PARTICIPANTS}/{meeting['id']}/{directory.bob}", headers=auth_headers(directory.alice))
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = client.get(f"{PARTICIPANTS}/{meeting['id']}/{directory.bob}", headers=auth_headers(directory.alice))
        assert response.status_code == 404


@pytest.mark.integration
class TestListParticipants:

    def test_requires_meeting_or_course(self, client, auth_headers, directory):
        response = client.post(f"{PARTICIPANTS}/list/", json={}, headers=auth_headers(directory.alice))
        assert response.status_code == 400

    def test_outsider_sees_only_own_rows(self, client, auth_headers, directory, meeting):
        response = client.post(
            f"{PARTICIPANTS}/list/", json={"meeting_id": meeting["id"]}, headers=auth_headers(directory.carol)
        )
        assert response.status_code == 200
        assert response.json() == []

    def test_staff_lists_course(self, client, auth_headers, directory, meeting):
        response = client.post(
            f"{PARTICIPANTS}/list/",
            json={"course_id": directory.course_id, "present": False},
            headers=auth_headers(directory.professor),
        )
        assert {p["participant_id"] for p in response.json()} == {directory.alice, directory.bob}
