"""Proposal model."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint

from proapoio.db.base import Base
from proapoio.utils.constants import ProposalStatus

# Name is matched when translating integrity errors into duplicate proposals
UNIQUE_PAIR_CONSTRAINT = "unique_candidate_vacancy_proposal"


class Proposal(Base):
    """Proposal exchanged between a candidate and the institution owning a vacancy.

    Cancelled proposals are deleted, so every stored row is live and the
    unique constraint below is the one-proposal-per-pair invariant.
    """

    __tablename__ = "proposals"
    __table_args__ = (
        UniqueConstraint("candidate_id", "vacancy_id", name=UNIQUE_PAIR_CONSTRAINT),
        CheckConstraint("initiator IN ('CANDIDATO', 'INSTITUICAO')", name="ck_proposals_initiator"),
        CheckConstraint("status IN ('ENVIADA', 'ACEITA', 'RECUSADA')", name="ck_proposals_status"),
        Index("idx_proposals_candidate_status", "candidate_id", "status"),
        Index("idx_proposals_created_id", "created_at", "id"),
    )

    vacancy_id = Column(Integer, ForeignKey("vacancies.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)

    initiator = Column(String(20), nullable=False)  # CANDIDATO, INSTITUICAO
    status = Column(String(20), nullable=False, default=ProposalStatus.SENT.value, index=True)

    message = Column(Text, nullable=False)
    response_message = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Proposal {self.id}: {self.initiator} {self.candidate_id} -> {self.vacancy_id} ({self.status})>"
