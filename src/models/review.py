"""Review model."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Review(Base, TimestampMixin):
    """A user's review of a bootcamp. One review per user per bootcamp."""

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("bootcamp_id", "user_id", name="uq_review_bootcamp_user"),)

    id = Column(Integer, primary_key=True, index=True)
    bootcamp_id = Column(Integer, ForeignKey("bootcamps.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    text = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)  # 1-10

    # Relationships
    bootcamp = relationship("Bootcamp", back_populates="reviews")
    user = relationship("User")
