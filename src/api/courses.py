"""Course API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from src.api.bootcamps import get_bootcamp_or_404
from src.api.dependencies import ensure_owner_or_admin, get_bootcamp_service, require_roles
from src.database import get_db
from src.errors import NotFoundError
from src.models.course import Course
from src.models.enums import Role
from src.models.user import User
from src.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from src.services.bootcamp_service import BootcampService

router = APIRouter(prefix="/api/v1", tags=["courses"])

publisher_or_admin = require_roles(Role.PUBLISHER, Role.ADMIN)


def get_course_or_404(db: Session, course_id: int) -> Course:
    """Get a course by id."""
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError(f"No course with the id of {course_id}")
    return course


@router.get("/courses", response_model=list[CourseResponse])
def get_courses(
    db: Annotated[Session, Depends(get_db)],
):
    """Get all courses with their bootcamp's name and description."""
    return db.query(Course).options(joinedload(Course.bootcamp)).order_by(Course.id).all()


@router.get("/bootcamps/{bootcamp_id}/courses", response_model=list[CourseResponse])
def get_bootcamp_courses(
    bootcamp_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get all courses for a bootcamp."""
    get_bootcamp_or_404(db, bootcamp_id)
    return db.query(Course).filter(Course.bootcamp_id == bootcamp_id).order_by(Course.id).all()


@router.get("/courses/{course_id}", response_model=CourseResponse)
def get_course(
    course_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific course."""
    return get_course_or_404(db, course_id)


@router.post(
    "/bootcamps/{bootcamp_id}/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_course(
    bootcamp_id: int,
    course_data: CourseCreate,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Add a course to a bootcamp (bootcamp owner or admin)."""
    bootcamp = get_bootcamp_or_404(db, bootcamp_id)
    ensure_owner_or_admin(bootcamp.user_id, current_user, f"add a course to bootcamp {bootcamp_id}")

    course = Course(
        **course_data.model_dump(mode="json"),
        bootcamp_id=bootcamp_id,
        user_id=current_user.id,
    )
    db.add(course)
    bootcamp_service.update_average_cost(bootcamp_id)
    db.commit()
    db.refresh(course)
    return course


@router.put("/courses/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: int,
    course_data: CourseUpdate,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Update a course (owner or admin)."""
    course = get_course_or_404(db, course_id)
    ensure_owner_or_admin(course.user_id, current_user, f"update course {course_id}")

    updates = course_data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    for field, value in updates.items():
        setattr(course, field, value)
    if "tuition" in updates:
        bootcamp_service.update_average_cost(course.bootcamp_id)

    db.commit()
    db.refresh(course)
    return course


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: int,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Delete a course (owner or admin)."""
    course = get_course_or_404(db, course_id)
    ensure_owner_or_admin(course.user_id, current_user, f"delete course {course_id}")

    bootcamp_id = course.bootcamp_id
    db.delete(course)
    bootcamp_service.update_average_cost(bootcamp_id)
    db.commit()
