"""Authentication schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.models.enums import Role
from src.services.auth import MAX_PASSWORD_BYTES


def within_bcrypt_limit(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=6), AfterValidator(within_bcrypt_limit)]


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: Password
    role: Role = Role.USER

    @field_validator("role")
    @classmethod
    def role_must_be_self_assignable(cls, value: Role) -> Role:
        if value not in Role.self_assignable():
            raise ValueError(f"Role '{value.value}' cannot be chosen at registration")
        return value


class UserLogin(BaseModel):
    """User login request.

    Fields are deliberately unconstrained: any malformed credential is
    reported as "Invalid credentials" rather than as a validation error.
    """

    email: str | None = None
    password: str | None = None


class UpdateDetails(BaseModel):
    """Update the current user's name and/or email."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)


class UpdatePassword(BaseModel):
    """Change password while logged in."""

    current_password: Annotated[str, AfterValidator(within_bcrypt_limit)]
    new_password: Password


class ForgotPassword(BaseModel):
    """Request a password reset email."""

    email: EmailStr = Field(..., max_length=255)


class ResetPassword(BaseModel):
    """Set a new password using an emailed reset token."""

    password: Password


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    data: str | dict = Field(default_factory=dict)
