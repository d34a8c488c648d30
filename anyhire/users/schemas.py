"""Pydantic schemas for user requests and responses."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from anyhire.db.models import ROLE_CUSTOMER

Role = Literal["customer", "jobSeeker", "admin"]


# --- Requests ---

class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    # Admins are provisioned out of band, never through signup.
    role: Literal["customer", "jobSeeker"] = ROLE_CUSTOMER


class LoginRequest(BaseModel):
    # Plain str: a malformed address is just another failed login.
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None


# --- Responses ---

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    image: str | None = None

    model_config = {"from_attributes": True}
