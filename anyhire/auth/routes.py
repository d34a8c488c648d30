"""Auth endpoints: signup, login, logout, refresh, profile."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from anyhire.auth.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    CurrentUser,
    get_current_user,
    get_token_store,
    require_admin,
)
from anyhire.auth.jwt import create_access_token, issue_tokens, verify_refresh
from anyhire.auth.passwords import check_password_async, hash_password_async
from anyhire.auth.token_store import RefreshTokenStore
from anyhire.config.settings import get_settings
from anyhire.db.models import ROLE_CUSTOMER, ROLE_JOB_SEEKER
from anyhire.errors import (
    AppError,
    Conflict,
    InvalidCredentials,
    TokenExpired,
    TokenInvalid,
    TokenMismatch,
    Unauthenticated,
)
from anyhire.users import repository as users_repo
from anyhire.users.schemas import LoginRequest, SignupRequest, UpdateProfileRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# --- Helpers ---

def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        name,
        value,
        max_age=max_age,
        httponly=True,
        secure=get_settings().secure_cookies,
        samesite="strict",
    )


def _set_access_cookie(response: Response, access_token: str) -> None:
    _set_cookie(response, ACCESS_COOKIE, access_token, get_settings().ACCESS_TOKEN_EXPIRE_MINUTES * 60)


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    _set_access_cookie(response, access_token)
    _set_cookie(response, REFRESH_COOKIE, refresh_token, get_settings().refresh_token_ttl_seconds)


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


async def _start_session(user: dict, response: Response, store: RefreshTokenStore) -> dict:
    """Issue tokens, persist the refresh token and set cookies."""
    user_id = str(user["id"])
    tokens = issue_tokens(user_id)
    # Overwrites any earlier refresh token for this user.
    await store.store(user_id, tokens.refresh_token)
    _set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return {**UserResponse.model_validate(user).model_dump(), "accessToken": tokens.access_token}


# --- Endpoints ---

@router.post("/signup", status_code=201, summary="Register a new user", description="Create an account and start a session.")
async def signup(body: SignupRequest, response: Response, store: RefreshTokenStore = Depends(get_token_store)):
    if await users_repo.get_by_email(body.email):
        raise Conflict("User already exists")

    user = await users_repo.create({
        "name": body.name,
        "email": body.email,
        "password_hash": await hash_password_async(body.password),
        "role": body.role,
    })
    logger.info("User %s signed up as %s", user["id"], body.role)

    data = await _start_session(user, response, store)
    return {"status": "success", "data": data}


@router.post("/login", summary="Login", description="Authenticate with email and password; sets accessToken and refreshToken cookies.")
async def login(body: LoginRequest, response: Response, store: RefreshTokenStore = Depends(get_token_store)):
    user = await users_repo.get_by_email(body.email)
    if not user or not await check_password_async(body.password, user.get("password_hash") or ""):
        raise InvalidCredentials()

    data = await _start_session(user, response, store)
    return {"status": "success", "data": data}


@router.post("/logout", summary="Logout", description="Forget the stored refresh token, if any, and clear both cookies. Idempotent.")
async def logout(request: Request, response: Response, store: RefreshTokenStore = Depends(get_token_store)):
    refresh_token = request.cookies.get(REFRESH_COOKIE)
    if refresh_token:
        try:
            user_id = verify_refresh(refresh_token)
        except (TokenInvalid, TokenExpired):
            user_id = None
        if user_id:
            await store.remove(user_id)

    _clear_auth_cookies(response)
    return {"status": "success", "data": {"message": "Logged out successfully"}}


@router.post("/refresh-token", summary="Refresh access token", description="Mint a new access token from the refreshToken cookie. The refresh token itself is not rotated.")
async def refresh_token(request: Request, response: Response, store: RefreshTokenStore = Depends(get_token_store)):
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise Unauthenticated("No refresh token provided")

    user_id = verify_refresh(token)
    stored = await store.fetch(user_id)
    if stored != token:
        raise TokenMismatch()

    access_token = create_access_token(user_id)
    _set_access_cookie(response, access_token)
    return {"status": "success", "data": {"message": "Token refreshed successfully", "accessToken": access_token}}


@router.get("/profile", summary="Current user", description="Return the authenticated user's profile.")
async def get_profile(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": user.public()}


@router.put("/profile", summary="Update profile", description="Update the authenticated user's name or email.")
async def update_profile(body: UpdateProfileRequest, user: CurrentUser = Depends(get_current_user)):
    changes = body.model_dump(exclude_none=True)
    if not changes:
        return {"status": "success", "data": user.public()}

    if "email" in changes and changes["email"].lower() != user.email.lower():
        if await users_repo.get_by_email(changes["email"]):
            raise Conflict("Email already in use")

    updated = await users_repo.update(user.id, changes)
    if not updated:
        raise Unauthenticated("User not found")
    return {"status": "success", "data": UserResponse.model_validate(updated).model_dump()}


@router.delete("/profile", summary="Delete account", description="Delete the authenticated user's account and end the session.")
async def delete_account(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    store: RefreshTokenStore = Depends(get_token_store),
):
    await store.remove(user.id)
    await users_repo.delete(user.id)
    logger.info("User %s deleted their account", user.id)

    _clear_auth_cookies(response)
    return {"status": "success", "data": {"message": "Account deleted successfully"}}


@router.post("/upgrade-role", summary="Become a job seeker", description="Upgrade a customer account to a job seeker account.")
async def upgrade_role(user: CurrentUser = Depends(get_current_user)):
    if user.role == ROLE_JOB_SEEKER:
        raise AppError("You are already a job seeker")
    if user.role != ROLE_CUSTOMER:
        raise AppError("Only customers can upgrade to job seekers")

    updated = await users_repo.update(user.id, {"role": ROLE_JOB_SEEKER})
    if not updated:
        raise Unauthenticated("User not found")
    return {"status": "success", "data": {"message": "Successfully upgraded to job seeker", "role": ROLE_JOB_SEEKER}}


@router.get("/users", summary="List users", description="Admin only: list all users.")
async def list_users(admin: CurrentUser = Depends(require_admin)):
    rows = await users_repo.list_all()
    users = [UserResponse.model_validate(row).model_dump() for row in rows]
    return {"status": "success", "data": users}
