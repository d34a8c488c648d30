"""JWT token creation and verification.

Access and refresh tokens are signed with distinct secrets and carry the
user id as their only application claim. The ``type`` claim keeps one kind
from being replayed as the other.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from anyhire.config.settings import get_settings
from anyhire.errors import TokenExpired, TokenInvalid

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _encode(user_id: str, token_type: str, lifetime: timedelta, secret: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def _decode(token: str, token_type: str, secret: str) -> str:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM], options={"require": ["exp", "iat"]})
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.InvalidTokenError as exc:
        raise TokenInvalid() from exc

    user_id = payload.get("userId")
    if payload.get("type") != token_type or not user_id:
        raise TokenInvalid()
    return str(user_id)


def create_access_token(user_id: str) -> str:
    settings = get_settings()
    return _encode(
        user_id,
        "access",
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings.ACCESS_TOKEN_SECRET,
    )


def create_refresh_token(user_id: str) -> str:
    settings = get_settings()
    return _encode(
        user_id,
        "refresh",
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        settings.REFRESH_TOKEN_SECRET,
    )


def issue_tokens(user_id: str) -> TokenPair:
    return TokenPair(create_access_token(user_id), create_refresh_token(user_id))


def verify_access(token: str) -> str:
    """Return the user id. Raises TokenExpired or TokenInvalid."""
    return _decode(token, "access", get_settings().ACCESS_TOKEN_SECRET)


def verify_refresh(token: str) -> str:
    """Return the user id. Callers must still compare against the stored token."""
    return _decode(token, "refresh", get_settings().REFRESH_TOKEN_SECRET)
