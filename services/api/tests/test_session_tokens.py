from datetime import date, datetime, timedelta, timezone
from uuid import UUID

import jwt
import pytest
from fastapi import HTTPException

from notes_api.core.config import get_settings
from notes_api.core.security import parse_authorization_header, verify_session_token
from notes_api.models.user import User
from notes_api.services.local_auth import issue_access_token


@pytest.fixture(autouse=True)
def token_settings(monkeypatch):
    monkeypatch.setenv("NOTES_AUTH_JWT_SECRET", "unit-test-secret")
    monkeypatch.setenv("NOTES_AUTH_JWT_ALGORITHMS", "HS256")
    monkeypatch.delenv("NOTES_AUTH_JWT_LEEWAY_SECONDS", raising=False)
    monkeypatch.delenv("NOTES_AUTH_ACCESS_TOKEN_TTL_SECONDS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _user() -> User:
    return User(
        id=UUID("00000000-0000-0000-0000-000000000111"),
        name="Token User",
        email="token@example.com",
        date_of_birth=date(1990, 1, 1),
    )


def test_issued_token_carries_identity_and_one_hour_expiry():
    now = datetime.now(timezone.utc)
    token, expires_at = issue_access_token(_user(), now=now)
    claims = jwt.decode(token, options={"verify_signature": False})

    assert claims["sub"] == "00000000-0000-0000-0000-000000000111"
    assert claims["email"] == "token@example.com"
    assert claims["exp"] - claims["iat"] == 3600
    assert expires_at == now + timedelta(hours=1)


def test_gate_accepts_fresh_token():
    token, _ = issue_access_token(_user())
    ctx = parse_authorization_header(f"Bearer {token}")

    assert ctx.user_id == UUID("00000000-0000-0000-0000-000000000111")
    assert ctx.email == "token@example.com"


def test_gate_accepts_token_just_before_expiry():
    issued = datetime.now(timezone.utc) - timedelta(minutes=59)
    token, _ = issue_access_token(_user(), now=issued)
    assert verify_session_token(token).email == "token@example.com"


def test_gate_rejects_expired_token():
    issued = datetime.now(timezone.utc) - timedelta(hours=1, seconds=1)
    token, _ = issue_access_token(_user(), now=issued)

    with pytest.raises(HTTPException) as exc:
        parse_authorization_header(f"Bearer {token}")
    assert exc.value.status_code == 401
    assert exc.value.detail["code"] == "INVALID_OR_EXPIRED_TOKEN"


def test_gate_rejects_token_signed_with_other_secret():
    token = jwt.encode(
        {
            "sub": "00000000-0000-0000-0000-000000000111",
            "email": "token@example.com",
            "iss": "notes-api",
            "iat": int(datetime.now(timezone.utc).timestamp()),
            "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp()),
        },
        "another-secret",
        algorithm="HS256",
    )
    with pytest.raises(HTTPException) as exc:
        parse_authorization_header(f"Bearer {token}")
    assert exc.value.detail["code"] == "INVALID_OR_EXPIRED_TOKEN"


def test_rotating_secret_invalidates_outstanding_tokens(monkeypatch):
    token, _ = issue_access_token(_user())
    monkeypatch.setenv("NOTES_AUTH_JWT_SECRET", "rotated-secret")
    get_settings.cache_clear()

    with pytest.raises(HTTPException) as exc:
        verify_session_token(token)
    assert exc.value.detail["code"] == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.parametrize("payload", [{"email": "x@example.com"}, {"sub": "not-a-uuid", "email": "x@example.com"}, {"sub": "00000000-0000-0000-0000-000000000111"}])
def test_gate_rejects_malformed_payload(payload):
    now = datetime.now(timezone.utc)
    claims = {"iss": "notes-api", "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())}
    claims.update(payload)
    token = jwt.encode(claims, "unit-test-secret", algorithm="HS256")

    with pytest.raises(HTTPException) as exc:
        verify_session_token(token)
    assert exc.value.detail["code"] == "INVALID_OR_EXPIRED_TOKEN"


def test_gate_rejects_garbage_token():
    with pytest.raises(HTTPException) as exc:
        parse_authorization_header("Bearer not.a.jwt")
    assert exc.value.detail["code"] == "INVALID_OR_EXPIRED_TOKEN"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_gate_reports_missing_credential(header):
    with pytest.raises(HTTPException) as exc:
        parse_authorization_header(header)
    assert exc.value.status_code == 401
    assert exc.value.detail["code"] == "NO_CREDENTIAL"
