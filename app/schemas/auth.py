"""Request/response schemas for auth endpoints."""

import uuid

from pydantic import Field

from app.core.security import (
    ADMIN_ROLE,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """New account details."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    role: str = Field(..., min_length=1, max_length=64, description="Role, e.g. User or Admin")
    email: str = Field(..., min_length=1, max_length=320, description="Email address")


class LoginRequest(CamelModel):
    """Credentials for login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class RefreshRequest(CamelModel):
    """Refresh token exchange request."""

    user_id: uuid.UUID = Field(..., description="Id of the user the refresh token belongs to")
    refresh_token: str = Field(..., description="Refresh token")


class TokenResponse(CamelModel):
    """JWT access token plus the rotated refresh token."""

    access_token: str = Field(..., description="JWT access token (HS512)")
    refresh_token: str = Field(..., description="Opaque refresh token")


class UserResponse(CamelModel):
    """User as exposed over the API (no password hash or refresh token)."""

    id: uuid.UUID
    username: str
    email: str
    role: str


class CurrentUser(CamelModel):
    """Authenticated user taken from access-token claims."""

    id: uuid.UUID
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
