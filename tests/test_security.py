from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from store_ratings.core.config import settings
from store_ratings.core.errors import ConfigurationError, InvalidTokenError
from store_ratings.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_token_round_trip_carries_identity_claims():
    token = create_access_token(7, "alice")
    claims = decode_access_token(token)
    assert claims.id == 7
    assert claims.username == "alice"
    assert claims.type == "user"


def test_token_expires_exactly_seven_days_after_issue():
    claims = jwt.get_unverified_claims(create_access_token(1, "alice"))
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_expired_token_is_rejected():
    issued = datetime.now(tz=timezone.utc) - timedelta(days=8)
    token = create_access_token(1, "alice", issued_at=issued)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_another_secret_is_rejected():
    forged = jwt.encode({"id": 1, "username": "alice", "type": "user"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        decode_access_token(forged)


def test_malformed_token_is_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("not-a-jwt")


def test_token_without_identity_claims_is_rejected():
    token = jwt.encode({"sub": "1"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_missing_secret_never_skips_verification(monkeypatch):
    token = create_access_token(1, "alice")
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", None)
    with pytest.raises(ConfigurationError):
        create_access_token(1, "alice")
    with pytest.raises(ConfigurationError):
        decode_access_token(token)


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("password1")
    second = hash_password("password1")
    assert first != second
    assert first.startswith("$2")
    assert verify_password("password1", first)
    assert not verify_password("password2", first)
