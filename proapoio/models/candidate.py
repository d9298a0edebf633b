"""Candidate model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from proapoio.db.base import Base


class Candidate(Base):
    """Support-agent candidate profile."""

    __tablename__ = "candidates"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(20))
    cpf = Column(String(11), unique=True)  # never disclosed through proposals
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<Candidate {self.full_name}>"
