"""Tests for token issuing/verification and password hashing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from anyhire.auth.jwt import ALGORITHM, create_access_token, issue_tokens, verify_access, verify_refresh
from anyhire.auth.passwords import check_password, hash_password
from anyhire.config.settings import get_settings
from anyhire.errors import TokenExpired, TokenInvalid


def _forge(secret: str, token_type: str, issued: datetime, lifetime: timedelta, user_id="u1") -> str:
    payload = {"userId": user_id, "type": token_type, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def test_issue_tokens_round_trip():
    pair = issue_tokens("u1")
    assert verify_access(pair.access_token) == "u1"
    assert verify_refresh(pair.refresh_token) == "u1"


def test_token_expiries():
    settings = get_settings()
    pair = issue_tokens("u1")
    access = jwt.decode(pair.access_token, settings.ACCESS_TOKEN_SECRET, algorithms=[ALGORITHM])
    refresh = jwt.decode(pair.refresh_token, settings.REFRESH_TOKEN_SECRET, algorithms=[ALGORITHM])
    assert access["exp"] - access["iat"] == 15 * 60
    assert refresh["exp"] - refresh["iat"] == 7 * 24 * 60 * 60


def test_tokens_are_unique_per_issue():
    assert issue_tokens("u1").refresh_token != issue_tokens("u1").refresh_token


def test_access_token_expired_after_fifteen_minutes():
    secret = get_settings().ACCESS_TOKEN_SECRET
    issued = datetime.now(timezone.utc) - timedelta(minutes=16)
    token = _forge(secret, "access", issued, timedelta(minutes=15))
    with pytest.raises(TokenExpired):
        verify_access(token)


def test_bad_signature_is_invalid():
    token = _forge("some-other-secret", "access", datetime.now(timezone.utc), timedelta(minutes=15))
    with pytest.raises(TokenInvalid):
        verify_access(token)


def test_garbage_is_invalid():
    with pytest.raises(TokenInvalid):
        verify_access("not-a-jwt")


def test_refresh_token_rejected_as_access_token():
    pair = issue_tokens("u1")
    with pytest.raises(TokenInvalid):
        verify_access(pair.refresh_token)
    with pytest.raises(TokenInvalid):
        verify_refresh(pair.access_token)


def test_wrong_type_claim_with_right_secret():
    token = _forge(get_settings().ACCESS_TOKEN_SECRET, "refresh", datetime.now(timezone.utc), timedelta(minutes=5))
    with pytest.raises(TokenInvalid):
        verify_access(token)


def test_access_token_carries_user_id_claim():
    token = create_access_token("abc")
    payload = jwt.decode(token, options={"verify_signature": False})
    assert payload["userId"] == "abc"
    assert payload["type"] == "access"


def test_password_hashing():
    hashed = hash_password("correct")
    assert hashed != "correct"
    assert check_password("correct", hashed)
    assert not check_password("wrong", hashed)


def test_check_password_against_malformed_hash():
    assert not check_password("correct", "not-a-bcrypt-hash")
