"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Payload for student self-registration."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = Field(default=None, max_length=32)
    university_id: int
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)


class MessageResponse(BaseModel):
    message: str


class AuthUserResponse(BaseModel):
    """User response for auth endpoints."""

    id: int
    name: str
    email: str
    phone: str | None = None
    role: str
    status: str
    university_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"
    user: AuthUserResponse
