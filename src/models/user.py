"""User model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import deferred

from src.database import Base
from src.models.enums import Role
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    # Not loaded unless a query asks for it with undefer()
    password_hash = deferred(Column(String(255), nullable=False))
    # SHA-256 hex digest of the emailed reset token; set together with the expiry
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expire = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
