"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """New account credentials. Accounts are created with the developer role."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class RegisterResponse(CamelModel):
    id: int
    username: str


class LoginRequest(CamelModel):
    """Credentials for login. Only presence is validated here; bad values yield 401."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class LoginResponse(CamelModel):
    """Logged-in user plus the bearer token that identifies them on later calls."""

    id: int
    username: str
    role: str
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
