"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field
from src.api.schemas.users import UserResponse
from src.domain.roles import Role

# --- Request Schemas ---


class LoginRequest(BaseModel):
    """Request schema for login.

    Values are not shape-checked here: a malformed employee ID fails the same
    way as a wrong password.
    """

    employee_id: str = Field(..., description="7-digit employee ID")
    password: str = Field(..., description="User password")


# --- Response Schemas ---


class TokenResponse(BaseModel):
    """Response schema containing the session token."""

    access_token: str = Field(..., description="Signed session token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Session TTL in seconds")


class IdentityResponse(BaseModel):
    """Claims of the authenticated user."""

    id: str
    employee_id: str
    first_name: str
    last_name: str
    email: str | None = None
    role: Role


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    user: IdentityResponse
    tokens: TokenResponse


class MeResponse(BaseModel):
    user: UserResponse
