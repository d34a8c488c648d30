"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

from fastapi import Depends, Request

from anyhire.auth.jwt import verify_access
from anyhire.auth.token_store import RefreshTokenStore, get_redis
from anyhire.config.settings import get_settings
from anyhire.db.models import ROLE_ADMIN
from anyhire.errors import Forbidden, Unauthenticated
from anyhire.users import repository as users_repo

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@dataclass
class CurrentUser:
    id: str
    email: str
    name: str
    role: str
    image: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "CurrentUser":
        return cls(
            id=str(row["id"]),
            email=row["email"],
            name=row["name"],
            role=row["role"],
            image=row.get("image"),
        )

    def public(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role, "image": self.image}


def get_token_store() -> RefreshTokenStore:
    return RefreshTokenStore(get_redis(), get_settings().refresh_token_ttl_seconds)


def extract_bearer(value: str | None) -> str | None:
    if value and value.startswith("Bearer "):
        return value[7:].strip() or None
    return None


async def authenticate_token(token: str) -> CurrentUser:
    """Verify an access token and load its user.

    Raises TokenExpired/TokenInvalid from verification, or Unauthenticated when
    the account no longer exists.
    """
    user_id = verify_access(token)
    row = await users_repo.get_by_id(user_id)
    if not row:
        raise Unauthenticated("User not found")
    return CurrentUser.from_row(row)


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via the accessToken cookie or a Bearer header."""
    token = request.cookies.get(ACCESS_COOKIE) or extract_bearer(request.headers.get("Authorization"))
    if not token:
        raise Unauthenticated("No access token provided")

    user = await authenticate_token(token)
    request.state.user = user
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role != ROLE_ADMIN:
        raise Forbidden("Access denied - Admin only")
    return user
