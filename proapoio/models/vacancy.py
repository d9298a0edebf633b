"""Vacancy model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from proapoio.db.base import Base
from proapoio.utils.constants import VacancyStatus


class Vacancy(Base):
    """Support-agent vacancy published by an institution."""

    __tablename__ = "vacancies"
    __table_args__ = (
        Index("idx_vacancies_institution_status", "institution_id", "status"),
    )

    institution_id = Column(
        Integer, ForeignKey("institutions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=VacancyStatus.OPEN.value, index=True)
    city = Column(String(120))
    state = Column(String(2))
    deleted_at = Column(DateTime, nullable=True)  # soft delete

    def __repr__(self):
        return f"<Vacancy {self.title} ({self.status})>"
