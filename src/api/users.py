"""User administration API endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.dependencies import require_roles
from src.database import get_db
from src.errors import NotFoundError, ValidationError
from src.models.enums import Role
from src.models.user import User
from src.schemas.auth import UserResponse
from src.schemas.user import UserCreate, UserUpdate
from src.services.auth import create_user, get_password_hash, get_user_by_email

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User not found with id of {user_id}")
    return user


@router.get("", response_model=list[UserResponse])
def get_users(
    db: Annotated[Session, Depends(get_db)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 25,
):
    """List users."""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single user."""
    return get_user_or_404(db, user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user_admin(
    user_data: UserCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a user with any role."""
    if get_user_by_email(db, user_data.email):
        raise ValidationError("Email already registered")

    password_hash = await run_in_threadpool(get_password_hash, user_data.password)
    return create_user(db, user_data.name, user_data.email, password_hash, user_data.role)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Update a user. The password is only re-hashed when one is supplied."""
    user = get_user_or_404(db, user_id)

    if user_data.email is not None and user_data.email != user.email:
        if get_user_by_email(db, user_data.email):
            raise ValidationError("Email already registered")
        user.email = user_data.email
    if user_data.name is not None:
        user.name = user_data.name
    if user_data.role is not None:
        user.role = user_data.role.value
    if user_data.password is not None:
        user.password_hash = await run_in_threadpool(get_password_hash, user_data.password)

    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a user."""
    user = get_user_or_404(db, user_id)
    db.delete(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("User still owns bootcamps, courses or reviews") from None
