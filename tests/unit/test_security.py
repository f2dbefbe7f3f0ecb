"""Unit tests for security functions."""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from zoneinfo import ZoneInfo

import jwt
from fastapi import HTTPException

from classvote.core import config
from classvote.core.security import (
    ADMIN_COOKIE_NAME,
    create_access_token,
    create_vote_admin_token,
    decode_admin_token,
    get_password_hash,
    verify_password,
    verify_vote_admin_password,
    verify_vote_admin_token,
)
from classvote.core.utils import date_master_key

TOKYO = ZoneInfo("Asia/Tokyo")


def _request_with_cookie(token=None):
    request = Mock()
    request.cookies = {ADMIN_COOKIE_NAME: token} if token else {}
    return request


@pytest.mark.unit
class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = get_password_hash("1234")
        assert hashed != "1234"
        assert verify_password("1234", hashed) is True
        assert verify_password("4321", hashed) is False

    def test_invalid_hash_is_rejected(self):
        assert verify_password("1234", "not-an-argon2-hash") is False


@pytest.mark.unit
class TestMasterKey:

    def test_date_master_key_uses_timezone(self):
        # 2026-10-18 20:00 UTC is already the 19th in Tokyo
        now = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert date_master_key(TOKYO, now) == "20261019"
        assert date_master_key(ZoneInfo("UTC"), now) == "20261018"

    def test_vote_code_accepted(self):
        hashed = get_password_hash("1234")
        assert verify_vote_admin_password("1234", hashed, tz=TOKYO) is True

    def test_master_key_accepted_for_any_vote(self):
        hashed = get_password_hash("1234")
        now = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert verify_vote_admin_password("20261019", hashed, tz=TOKYO, now=now) is True

    def test_yesterdays_master_key_rejected(self):
        hashed = get_password_hash("1234")
        now = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert verify_vote_admin_password("20261018", hashed, tz=TOKYO, now=now) is False

    def test_master_key_can_be_disabled(self, monkeypatch):
        monkeypatch.setattr(config.settings, "MASTER_KEY_ENABLED", False)
        hashed = get_password_hash("1234")
        now = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert verify_vote_admin_password("20261019", hashed, tz=TOKYO, now=now) is False


@pytest.mark.unit
class TestAdminToken:

    def test_token_is_scoped_to_vote(self):
        token = create_vote_admin_token("vote-a")
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
        assert payload["is_admin"] is True
        assert payload["vote_id"] == "vote-a"

    def test_verify_matching_vote(self):
        request = _request_with_cookie(create_vote_admin_token("vote-a"))
        assert verify_vote_admin_token("vote-a", request)["vote_id"] == "vote-a"

    def test_other_vote_is_forbidden(self):
        request = _request_with_cookie(create_vote_admin_token("vote-a"))
        with pytest.raises(HTTPException) as exc:
            verify_vote_admin_token("vote-b", request)
        assert exc.value.status_code == 403

    def test_missing_cookie(self):
        with pytest.raises(HTTPException) as exc:
            decode_admin_token(_request_with_cookie())
        assert exc.value.status_code == 401

    def test_expired_token(self):
        token = create_access_token({"is_admin": True, "vote_id": "a"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(HTTPException) as exc:
            decode_admin_token(_request_with_cookie(token))
        assert exc.value.status_code == 401
        assert exc.value.detail == "Token expired"

    def test_tampered_token(self):
        token = jwt.encode({"is_admin": True, "vote_id": "a"}, "wrong-secret", algorithm="HS256")
        with pytest.raises(HTTPException) as exc:
            decode_admin_token(_request_with_cookie(token))
        assert exc.value.status_code == 401

    def test_non_admin_token(self):
        token = create_access_token({"vote_id": "a"})
        with pytest.raises(HTTPException) as exc:
            decode_admin_token(_request_with_cookie(token))
        assert exc.value.status_code == 403
