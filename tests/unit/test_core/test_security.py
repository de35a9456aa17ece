"""Unit tests for caller identity verification."""
import pytest
from datetime import timedelta
from unittest.mock import Mock

import jwt
from fastapi import HTTPException

from attendance.core.config import settings
from attendance.core.security import create_access_token, get_current_user_id


def make_request(headers=None, cookies=None):
    request = Mock()
    request.headers = headers or {}
    request.cookies = cookies or {}
    return request


@pytest.mark.unit
class TestGetCurrentUserId:

    def test_bearer_token(self):
        token = create_access_token({"sub": "user-1"})
        request = make_request(headers={"Authorization": f"Bearer {token}"})
        assert get_current_user_id(request) == "user-1"

    def test_session_cookie(self):
        token = create_access_token({"sub": "user-2"})
        request = make_request(cookies={"session_token": token})
        assert get_current_user_id(request) == "user-2"

    def test_bearer_header_wins_over_cookie(self):
        request = make_request(
            headers={"Authorization": f"Bearer {create_access_token({'sub': 'header-user'})}"},
            cookies={"session_token": create_access_token({"sub": "cookie-user"})},
        )
        assert get_current_user_id(request) == "header-user"

    def test_missing_token(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(make_request())
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Not authenticated"

    def test_expired_token(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(make_request(headers={"Authorization": f"Bearer {token}"}))
        assert exc_info.value.detail == "Token expired"

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "user-1"}, "a-different-secret-than-the-identity-service-uses", algorithm=settings.ALGORITHM)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(make_request(headers={"Authorization": f"Bearer {token}"}))
        assert exc_info.value.detail == "Invalid token"

    def test_token_without_subject(self):
        token = create_access_token({"role": "student"})
        with pytest.raises(HTTPException) as exc_info:
            get_current_user_id(make_request(headers={"Authorization": f"Bearer {token}"}))
        assert exc_info.value.status_code == 401
