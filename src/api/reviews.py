"""Review API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from src.api.bootcamps import get_bootcamp_or_404
from src.api.dependencies import ensure_owner_or_admin, get_bootcamp_service, require_roles
from src.database import get_db
from src.errors import NotFoundError, ValidationError
from src.models.enums import Role
from src.models.review import Review
from src.models.user import User
from src.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from src.services.bootcamp_service import BootcampService

router = APIRouter(prefix="/api/v1", tags=["reviews"])

user_or_admin = require_roles(Role.USER, Role.ADMIN)


def get_review_or_404(db: Session, review_id: int) -> Review:
    """Get a review by id, with its bootcamp loaded."""
    review = (
        db.query(Review)
        .options(joinedload(Review.bootcamp))
        .filter(Review.id == review_id)
        .first()
    )
    if not review:
        raise NotFoundError(f"No review found with the id of {review_id}")
    return review


@router.get("/reviews", response_model=list[ReviewResponse])
def get_reviews(
    db: Annotated[Session, Depends(get_db)],
):
    """Get all reviews."""
    return db.query(Review).options(joinedload(Review.bootcamp)).order_by(Review.id).all()


@router.get("/bootcamps/{bootcamp_id}/reviews", response_model=list[ReviewResponse])
def get_bootcamp_reviews(
    bootcamp_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get all reviews for a bootcamp."""
    get_bootcamp_or_404(db, bootcamp_id)
    return db.query(Review).filter(Review.bootcamp_id == bootcamp_id).order_by(Review.id).all()


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific review."""
    return get_review_or_404(db, review_id)


@router.post(
    "/bootcamps/{bootcamp_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    bootcamp_id: int,
    review_data: ReviewCreate,
    current_user: Annotated[User, Depends(user_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Review a bootcamp. Each user may review a bootcamp once."""
    get_bootcamp_or_404(db, bootcamp_id)

    existing = (
        db.query(Review)
        .filter(Review.bootcamp_id == bootcamp_id, Review.user_id == current_user.id)
        .first()
    )
    if existing:
        raise ValidationError("You have already reviewed this bootcamp")

    review = Review(**review_data.model_dump(), bootcamp_id=bootcamp_id, user_id=current_user.id)
    db.add(review)
    try:
        bootcamp_service.update_average_rating(bootcamp_id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("You have already reviewed this bootcamp") from None
    db.refresh(review)
    return review


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    current_user: Annotated[User, Depends(user_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Update a review (author or admin)."""
    review = get_review_or_404(db, review_id)
    ensure_owner_or_admin(review.user_id, current_user, "update this review")

    updates = review_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in updates.items():
        setattr(review, field, value)
    if "rating" in updates:
        bootcamp_service.update_average_rating(review.bootcamp_id)

    db.commit()
    db.refresh(review)
    return review


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    current_user: Annotated[User, Depends(user_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Delete a review (author or admin)."""
    review = get_review_or_404(db, review_id)
    ensure_owner_or_admin(review.user_id, current_user, "delete this review")

    bootcamp_id = review.bootcamp_id
    db.delete(review)
    bootcamp_service.update_average_rating(bootcamp_id)
    db.commit()
