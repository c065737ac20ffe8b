from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.exceptions import AuthenticationError
from app.core.security import TokenVerifier, parse_bearer

SECRET = "test-secret"


def _token(secret=SECRET, **overrides):
    payload = {
        "sub": "7",
        "username": "budi",
        "is_admin": True,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
    }
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, secret, algorithm="HS256")


def test_verify_returns_typed_claims():
    claims = TokenVerifier(SECRET).verify(_token())

    assert claims.subject_id == "7"
    assert claims.username == "budi"
    assert claims.is_admin is True
    assert claims.expires_at > datetime.now(timezone.utc)


def test_non_boolean_admin_flag_is_not_admin():
    claims = TokenVerifier(SECRET).verify(_token(is_admin="true"))

    assert claims.is_admin is False


@pytest.mark.parametrize(
    "token, message",
    [
        (_token(exp=datetime.now(timezone.utc) - timedelta(minutes=1)), "Token has expired"),
        (_token(secret="another-secret"), "Invalid token"),
        (_token(exp=None), "Invalid token"),
        ("not-a-jwt", "Invalid token"),
    ],
)
def test_verify_rejects_bad_tokens(token, message):
    with pytest.raises(AuthenticationError) as excinfo:
        TokenVerifier(SECRET).verify(token)

    assert excinfo.value.message == message
    assert excinfo.value.status_code == 401


def test_verify_without_secret_rejects():
    with pytest.raises(AuthenticationError):
        TokenVerifier(None).verify(_token())


def test_parse_bearer():
    assert parse_bearer("Bearer abc.def") == "abc.def"
    assert parse_bearer("bearer abc") == "abc"

    with pytest.raises(AuthenticationError) as excinfo:
        parse_bearer(None)
    assert excinfo.value.message == "Authorization header is missing"

    for header in ("Token abc", "Bearer", "Bearer   "):
        with pytest.raises(AuthenticationError):
            parse_bearer(header)
