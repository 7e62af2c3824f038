"""Bootcamp service: slugs, derived averages and radius search."""

import logging
import math
import re

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.bootcamp import Bootcamp
from src.models.course import Course
from src.models.review import Review
from src.services.geocoder import GeocodedLocation

logger = logging.getLogger(__name__)

# Equatorial radius, matching the radius search of the public API
EARTH_RADIUS_KM = 6378.0


def slugify(value: str) -> str:
    """Lowercase, strip punctuation and join words with hyphens."""
    value = value.lower().strip()
    value = re.sub(r"[^\w\s-]", "", value)
    return re.sub(r"[\s_-]+", "-", value).strip("-")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def apply_location(bootcamp: Bootcamp, location: GeocodedLocation) -> None:
    bootcamp.latitude = location.latitude
    bootcamp.longitude = location.longitude
    bootcamp.formatted_address = location.formatted_address
    bootcamp.street = location.street
    bootcamp.city = location.city
    bootcamp.state = location.state
    bootcamp.zipcode = location.zipcode
    bootcamp.country = location.country


class BootcampService:
    """Service for bootcamp-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def update_average_cost(self, bootcamp_id: int) -> int | None:
        """Recompute a bootcamp's average tuition, rounded up to the next 10.

        The caller is responsible for committing the session.
        """
        self.db.flush()
        average = (
            self.db.query(func.avg(Course.tuition)).filter(Course.bootcamp_id == bootcamp_id).scalar()
        )
        average_cost = math.ceil(float(average) / 10) * 10 if average is not None else None

        bootcamp = self.db.get(Bootcamp, bootcamp_id)
        if bootcamp is not None:
            bootcamp.average_cost = average_cost
            logger.info(f"Bootcamp {bootcamp_id} average cost -> {average_cost}")
        return average_cost

    def update_average_rating(self, bootcamp_id: int) -> float | None:
        """Recompute a bootcamp's mean review rating.

        The caller is responsible for committing the session.
        """
        self.db.flush()
        average = (
            self.db.query(func.avg(Review.rating)).filter(Review.bootcamp_id == bootcamp_id).scalar()
        )
        average_rating = round(float(average), 1) if average is not None else None

        bootcamp = self.db.get(Bootcamp, bootcamp_id)
        if bootcamp is not None:
            bootcamp.average_rating = average_rating
            logger.info(f"Bootcamp {bootcamp_id} average rating -> {average_rating}")
        return average_rating

    def within_radius(self, latitude: float, longitude: float, distance_km: float) -> list[Bootcamp]:
        """Bootcamps whose geocoded location lies within distance_km of a point.

        Results are ordered nearest first. Bootcamps without coordinates are
        never returned.
        """
        located = (
            self.db.query(Bootcamp)
            .filter(Bootcamp.latitude.is_not(None), Bootcamp.longitude.is_not(None))
            .all()
        )
        matches = []
        for bootcamp in located:
            distance = haversine_km(latitude, longitude, bootcamp.latitude, bootcamp.longitude)
            if distance <= distance_km:
                matches.append((distance, bootcamp))
        matches.sort(key=lambda pair: pair[0])
        return [bootcamp for _, bootcamp in matches]
