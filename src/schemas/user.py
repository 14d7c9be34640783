"""User schema definitions.

This module defines the User profile model, the closed create/update schemas
used by the entity store, and the auth request/response bodies.
"""

import re
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UserRole = Literal["teacher", "student"]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address, rejecting malformed ones."""
    email = value.strip().lower()
    if not _EMAIL_PATTERN.match(email):
        raise ValueError(f"Invalid email address: {value!r}")
    return email


def normalize_username(value: str) -> str:
    username = value.strip()
    if not username:
        raise ValueError("Username cannot be empty")
    return username


class User(BaseModel):
    """A stored user profile."""

    id: str = Field(description="The unique identifier for the user.")
    email: str = Field(description="Unique email address, stored lowercase.")
    username: str = Field(description="Display name of the user.")
    password_hash: Optional[str] = Field(
        default=None,
        description="Bcrypt hash of the password. None for accounts managed elsewhere.",
    )
    role: UserRole = Field(description="Either 'teacher' or 'student'.")

    def public_dict(self) -> Dict[str, Any]:
        """Return the user fields that are safe to send to clients."""
        return self.model_dump(exclude={"password_hash"})


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str
    username: str
    role: UserRole
    password_hash: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return normalize_username(value)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = None
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else value

    @field_validator("username")
    @classmethod
    def check_username(cls, value: Optional[str]) -> Optional[str]:
        return normalize_username(value) if value is not None else value


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)
    username: str
    role: UserRole = "student"


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user: Dict[str, Any]
    token: str


class CurrentUserResponse(BaseModel):
    user: Dict[str, Any]
