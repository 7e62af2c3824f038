"""Course model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import SkillLevel
from src.models.mixins import TimestampMixin


class Course(Base, TimestampMixin):
    """A course offered by a bootcamp."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    bootcamp_id = Column(Integer, ForeignKey("bootcamps.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String, nullable=False)
    weeks = Column(Integer, nullable=False)
    tuition = Column(Integer, nullable=False)
    minimum_skill = Column(String(20), nullable=False, default=SkillLevel.BEGINNER.value)
    scholarship_available = Column(Boolean, nullable=False, default=False)

    # Relationships
    bootcamp = relationship("Bootcamp", back_populates="courses")
    user = relationship("User")
