"""Review schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.bootcamp import BootcampSummary


class ReviewCreate(BaseModel):
    """Create a new review."""

    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=10)


class ReviewUpdate(BaseModel):
    """Update a review."""

    title: str | None = Field(None, min_length=1, max_length=100)
    text: str | None = Field(None, min_length=1)
    rating: int | None = Field(None, ge=1, le=10)


class ReviewResponse(BaseModel):
    """Review response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    bootcamp_id: int
    user_id: int
    title: str
    text: str
    rating: int
    created_at: datetime
    updated_at: datetime
    bootcamp: BootcampSummary | None = None
