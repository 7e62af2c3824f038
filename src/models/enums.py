"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """Account roles used by the authorization gate."""

    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"

    @classmethod
    def self_assignable(cls) -> tuple["Role", ...]:
        """Roles a user may pick for themselves at registration."""
        return (cls.USER, cls.PUBLISHER)


class Career(str, Enum):
    """Career tracks a bootcamp can offer."""

    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    UI_UX = "UI/UX"
    DATA_SCIENCE = "Data Science"
    BUSINESS = "Business"
    OTHER = "Other"


class SkillLevel(str, Enum):
    """Minimum skill level required for a course."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
