"""Bootcamp model."""

from sqlalchemy import JSON, Boolean, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Bootcamp(Base, TimestampMixin):
    """A coding bootcamp published by a publisher (or admin)."""

    __tablename__ = "bootcamps"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(50), unique=True, nullable=False)
    slug = Column(String(60), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    website = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=False)

    # Geocoded location, filled in from the address
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    formatted_address = Column(String(255), nullable=True)
    street = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    zipcode = Column(String(20), nullable=True, index=True)
    country = Column(String(50), nullable=True)

    careers = Column(JSON, nullable=False)  # ["Web Development", "UI/UX", ...]
    average_rating = Column(Float, nullable=True)
    average_cost = Column(Integer, nullable=True)
    photo = Column(String(255), nullable=False, default="no-photo.jpg")
    housing = Column(Boolean, nullable=False, default=False)
    job_assistance = Column(Boolean, nullable=False, default=False)
    job_guarantee = Column(Boolean, nullable=False, default=False)
    accept_gi = Column(Boolean, nullable=False, default=False)

    # Relationships
    owner = relationship("User", backref="bootcamps")
    courses = relationship("Course", back_populates="bootcamp", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="bootcamp", cascade="all, delete-orphan")
