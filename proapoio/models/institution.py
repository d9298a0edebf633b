"""Institution model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from proapoio.db.base import Base


class Institution(Base):
    """Educational institution profile."""

    __tablename__ = "institutions"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    trade_name = Column(String(255), nullable=False)
    cnpj = Column(String(14), unique=True)
    corporate_mobile = Column(String(20))
    landline_phone = Column(String(20))
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<Institution {self.trade_name}>"
