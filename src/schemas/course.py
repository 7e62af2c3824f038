"""Course schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import SkillLevel
from src.schemas.bootcamp import BootcampSummary


class CourseCreate(BaseModel):
    """Create a new course."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    weeks: int = Field(..., gt=0)
    tuition: int = Field(..., ge=0)
    minimum_skill: SkillLevel
    scholarship_available: bool = False


class CourseUpdate(BaseModel):
    """Update a course."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    weeks: int | None = Field(None, gt=0)
    tuition: int | None = Field(None, ge=0)
    minimum_skill: SkillLevel | None = None
    scholarship_available: bool | None = None


class CourseResponse(BaseModel):
    """Course response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    bootcamp_id: int
    user_id: int
    title: str
    description: str
    weeks: int
    tuition: int
    minimum_skill: str
    scholarship_available: bool
    created_at: datetime
    updated_at: datetime
    bootcamp: BootcampSummary | None = None
