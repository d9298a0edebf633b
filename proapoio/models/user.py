"""User model."""

from sqlalchemy import Boolean, Column, DateTime, String

from proapoio.db.base import Base
from proapoio.utils.constants import UserType


class User(Base):
    """User account; authentication itself is issued elsewhere."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    user_type = Column(String(20), nullable=False, default=UserType.CANDIDATE.value)
    is_active = Column(Boolean, default=True, nullable=False)
    deleted_at = Column(DateTime, nullable=True)  # soft delete

    def __repr__(self):
        return f"<User {self.email} ({self.user_type})>"
