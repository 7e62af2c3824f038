"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    AuthResponse,
    ForgotPassword,
    MessageResponse,
    ResetPassword,
    UpdateDetails,
    UpdatePassword,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.schemas.bootcamp import (
    BootcampCreate,
    BootcampListResponse,
    BootcampResponse,
    BootcampSummary,
    BootcampUpdate,
)
from src.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from src.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from src.schemas.user import UserCreate, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UpdateDetails",
    "UpdatePassword",
    "ForgotPassword",
    "ResetPassword",
    "AuthResponse",
    "MessageResponse",
    "UserResponse",
    "UserCreate",
    "UserUpdate",
    "BootcampCreate",
    "BootcampUpdate",
    "BootcampResponse",
    "BootcampSummary",
    "BootcampListResponse",
    "CourseCreate",
    "CourseUpdate",
    "CourseResponse",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
]
