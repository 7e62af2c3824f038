"""SQLAlchemy models."""

from src.models.bootcamp import Bootcamp
from src.models.course import Course
from src.models.review import Review
from src.models.user import User

__all__ = [
    "User",
    "Bootcamp",
    "Course",
    "Review",
]
