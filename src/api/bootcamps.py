"""Bootcamp API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.dependencies import (
    ensure_owner_or_admin,
    get_bootcamp_service,
    require_roles,
)
from src.config import get_settings
from src.database import get_db
from src.errors import DependencyError, NotFoundError, ValidationError
from src.models.bootcamp import Bootcamp
from src.models.enums import Role
from src.models.user import User
from src.schemas.bootcamp import (
    BootcampCreate,
    BootcampListResponse,
    BootcampResponse,
    BootcampUpdate,
)
from src.services.bootcamp_service import BootcampService, apply_location, slugify
from src.services.geocoder import Geocoder, GeocodingError, get_geocoder

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/v1/bootcamps", tags=["bootcamps"])

publisher_or_admin = require_roles(Role.PUBLISHER, Role.ADMIN)


def get_bootcamp_or_404(db: Session, bootcamp_id: int) -> Bootcamp:
    """Get a bootcamp by id."""
    bootcamp = db.query(Bootcamp).filter(Bootcamp.id == bootcamp_id).first()
    if not bootcamp:
        raise NotFoundError(f"Bootcamp not found with id of {bootcamp_id}")
    return bootcamp


async def geocode_bootcamp(bootcamp: Bootcamp, geocoder: Geocoder) -> None:
    """Fill in the bootcamp's location from its address."""
    try:
        location = await geocoder.geocode(bootcamp.address)
    except GeocodingError as e:
        raise DependencyError(f"Could not geocode address: {e}") from e
    apply_location(bootcamp, location)


def commit_bootcamp(db: Session, bootcamp: Bootcamp) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("A bootcamp with this name already exists") from None
    db.refresh(bootcamp)


@router.get("", response_model=BootcampListResponse)
def get_bootcamps(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = 25,
):
    """Get a page of bootcamps, newest first."""
    limit = min(limit, settings.max_bootcamp_page_size)
    query = db.query(Bootcamp)
    total = query.count()
    bootcamps = (
        query.order_by(Bootcamp.created_at.desc(), Bootcamp.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return BootcampListResponse(
        count=len(bootcamps),
        page=page,
        limit=limit,
        total=total,
        data=[BootcampResponse.model_validate(b) for b in bootcamps],
    )


@router.get("/radius/{zipcode}/{distance}", response_model=list[BootcampResponse])
async def get_bootcamps_in_radius(
    zipcode: str,
    distance: float,
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
    bootcamp_service: Annotated[BootcampService, Depends(get_bootcamp_service)],
):
    """Get bootcamps within `distance` kilometres of a zipcode."""
    if distance <= 0:
        raise ValidationError("Distance must be greater than zero")
    try:
        origin = await geocoder.geocode(zipcode)
    except GeocodingError as e:
        raise DependencyError(f"Could not geocode zipcode: {e}") from e

    return bootcamp_service.within_radius(origin.latitude, origin.longitude, distance)


@router.get("/{bootcamp_id}", response_model=BootcampResponse)
def get_bootcamp(
    bootcamp_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific bootcamp."""
    return get_bootcamp_or_404(db, bootcamp_id)


@router.post("", response_model=BootcampResponse, status_code=status.HTTP_201_CREATED)
async def create_bootcamp(
    bootcamp_data: BootcampCreate,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
):
    """Create a bootcamp. Publishers may only publish one."""
    published = db.query(Bootcamp).filter(Bootcamp.user_id == current_user.id).first()
    if published and not current_user.is_admin:
        raise ValidationError(f"The user with ID {current_user.id} has already published a bootcamp")

    data = bootcamp_data.model_dump(mode="json")
    bootcamp = Bootcamp(**data, slug=slugify(bootcamp_data.name), user_id=current_user.id)
    await geocode_bootcamp(bootcamp, geocoder)

    db.add(bootcamp)
    commit_bootcamp(db, bootcamp)
    logger.info(f"User {current_user.id} created bootcamp {bootcamp.id}")
    return bootcamp


@router.put("/{bootcamp_id}", response_model=BootcampResponse)
async def update_bootcamp(
    bootcamp_id: int,
    bootcamp_data: BootcampUpdate,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
):
    """Update a bootcamp (owner or admin)."""
    bootcamp = get_bootcamp_or_404(db, bootcamp_id)
    ensure_owner_or_admin(bootcamp.user_id, current_user, "update this bootcamp")

    updates = bootcamp_data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    address_changed = "address" in updates and updates["address"] != bootcamp.address
    for field, value in updates.items():
        setattr(bootcamp, field, value)
    if "name" in updates:
        bootcamp.slug = slugify(updates["name"])
    if address_changed:
        await geocode_bootcamp(bootcamp, geocoder)

    commit_bootcamp(db, bootcamp)
    return bootcamp


@router.delete("/{bootcamp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bootcamp(
    bootcamp_id: int,
    current_user: Annotated[User, Depends(publisher_or_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a bootcamp with its courses and reviews (owner or admin)."""
    bootcamp = get_bootcamp_or_404(db, bootcamp_id)
    ensure_owner_or_admin(bootcamp.user_id, current_user, "delete this bootcamp")

    db.delete(bootcamp)
    db.commit()
    logger.info(f"User {current_user.id} deleted bootcamp {bootcamp_id}")
