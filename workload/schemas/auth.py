"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Payload for customer self-registration."""

    email: str
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    """Payload for user login by email or username."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"


class AuthUserResponse(BaseModel):
    """User response for auth endpoints."""

    id: int
    username: str
    email: str | None = None
    role: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)
