"""User administration schemas."""

from pydantic import BaseModel, EmailStr, Field

from src.models.enums import Role
from src.schemas.auth import Password


class UserCreate(BaseModel):
    """Admin-created user. Any role may be assigned."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: Password
    role: Role = Role.USER


class UserUpdate(BaseModel):
    """Admin update of a user. A supplied password is re-hashed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    role: Role | None = None
    password: Password | None = None
