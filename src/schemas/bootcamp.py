"""Bootcamp schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from src.models.enums import Career


class BootcampCreate(BaseModel):
    """Create a new bootcamp."""

    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    website: HttpUrl | None = None
    phone: str | None = Field(None, max_length=20)
    email: EmailStr | None = None
    address: str = Field(..., min_length=1, max_length=255)
    careers: list[Career] = Field(..., min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampUpdate(BaseModel):
    """Update a bootcamp."""

    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, min_length=1, max_length=500)
    website: HttpUrl | None = None
    phone: str | None = Field(None, max_length=20)
    email: EmailStr | None = None
    address: str | None = Field(None, min_length=1, max_length=255)
    careers: list[Career] | None = Field(None, min_length=1)
    housing: bool | None = None
    job_assistance: bool | None = None
    job_guarantee: bool | None = None
    accept_gi: bool | None = None


class BootcampResponse(BaseModel):
    """Bootcamp response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    slug: str
    description: str
    website: str | None
    phone: str | None
    email: str | None
    address: str
    latitude: float | None
    longitude: float | None
    formatted_address: str | None
    street: str | None
    city: str | None
    state: str | None
    zipcode: str | None
    country: str | None
    careers: list[str]
    average_rating: float | None
    average_cost: int | None
    photo: str
    housing: bool
    job_assistance: bool
    job_guarantee: bool
    accept_gi: bool
    created_at: datetime
    updated_at: datetime


class BootcampSummary(BaseModel):
    """Bootcamp name and description, embedded in course and review responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class BootcampListResponse(BaseModel):
    """A page of bootcamps."""

    count: int
    page: int
    limit: int
    total: int
    data: list[BootcampResponse]
