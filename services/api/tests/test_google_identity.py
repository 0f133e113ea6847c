import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi import HTTPException
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from notes_api.services.google_identity import GoogleIdentityVerifier

CLIENT_ID = "notes-client.apps.googleusercontent.com"
ISSUERS = ["accounts.google.com", "https://accounts.google.com"]


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class StaticKeySource:
    def __init__(self, public_key) -> None:
        self.public_key = public_key

    def get_signing_key_from_jwt(self, token: str):
        return SimpleNamespace(key=self.public_key)


class FailingKeySource:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def get_signing_key_from_jwt(self, token: str):
        raise self.error


def _id_token(private_key, **overrides) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "sub": "google-sub-1",
        "email": "grace@example.com",
        "email_verified": True,
        "name": "Grace Hopper",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=30)).timestamp()),
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "test-kid"})


def _verifier(signing_key, *, client_id: str | None = CLIENT_ID) -> GoogleIdentityVerifier:
    return GoogleIdentityVerifier(
        client_id=client_id,
        issuers=ISSUERS,
        key_source=StaticKeySource(signing_key.public_key()),
    )


def test_verify_extracts_email_name_and_subject(signing_key):
    identity = _verifier(signing_key).verify(_id_token(signing_key))

    assert identity.email == "grace@example.com"
    assert identity.name == "Grace Hopper"
    assert identity.subject == "google-sub-1"


def test_verify_allows_missing_name(signing_key):
    identity = _verifier(signing_key).verify(_id_token(signing_key, name=None))
    assert identity.name is None


def test_verify_rejects_wrong_audience(signing_key):
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(_id_token(signing_key, aud="someone-else"))
    assert exc.value.status_code == 401
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


def test_verify_rejects_foreign_issuer(signing_key):
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(_id_token(signing_key, iss="https://evil.example.com"))
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


def test_verify_rejects_token_signed_by_other_key(signing_key):
    other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(_id_token(other_key))
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


def test_verify_rejects_expired_token(signing_key):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = _id_token(
        signing_key,
        iat=int(past.timestamp()),
        exp=int((past + timedelta(minutes=30)).timestamp()),
    )
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(token)
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


def test_verify_reports_missing_email_claim(signing_key):
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(_id_token(signing_key, email=None))
    assert exc.value.status_code == 401
    assert exc.value.detail["code"] == "MISSING_CLAIM"


def test_verify_rejects_unverified_email(signing_key):
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key).verify(_id_token(signing_key, email_verified=False))
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


@pytest.mark.parametrize(
    "error",
    [
        PyJWKClientConnectionError("connection refused"),
        json.JSONDecodeError("Expecting value", "<html>502 Bad Gateway</html>", 0),
    ],
)
def test_key_fetch_failure_is_upstream_unavailable(signing_key, error: Exception):
    verifier = GoogleIdentityVerifier(
        client_id=CLIENT_ID,
        issuers=ISSUERS,
        key_source=FailingKeySource(error),
    )
    with pytest.raises(HTTPException) as exc:
        verifier.verify(_id_token(signing_key))
    assert exc.value.status_code == 503
    assert exc.value.detail["code"] == "UPSTREAM_UNAVAILABLE"


def test_unknown_signing_key_is_invalid_credential(signing_key):
    verifier = GoogleIdentityVerifier(
        client_id=CLIENT_ID,
        issuers=ISSUERS,
        key_source=FailingKeySource(PyJWKClientError("Unable to find a signing key that matches")),
    )
    with pytest.raises(HTTPException) as exc:
        verifier.verify(_id_token(signing_key))
    assert exc.value.detail["code"] == "INVALID_CREDENTIAL"


def test_unconfigured_client_id_is_upstream_unavailable(signing_key):
    with pytest.raises(HTTPException) as exc:
        _verifier(signing_key, client_id=None).verify(_id_token(signing_key))
    assert exc.value.status_code == 503
