"""Proposal Store: persistence with the one-live-proposal-per-pair invariant.

Concurrency control lives in the database:

- ``add`` relies on the ``unique_candidate_vacancy_proposal`` constraint;
  the insert itself is the duplicate check.
- ``transition`` and ``delete_if_sent`` are compare-and-set statements
  guarded by ``status = 'ENVIADA'``; a zero row count means another
  request got there first.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from proapoio.models.proposal import UNIQUE_PAIR_CONSTRAINT, Proposal
from proapoio.utils.constants import ActorKind, ProposalStatus
from proapoio.utils.helpers import page_count, paginate_query

logger = structlog.get_logger(__name__)


class DuplicateProposalError(Exception):
    """A live proposal already exists for the (candidate, vacancy) pair."""

    def __init__(self, candidate_id: int, vacancy_id: int):
        self.candidate_id = candidate_id
        self.vacancy_id = vacancy_id
        super().__init__(f"Proposal already exists for candidate {candidate_id} on vacancy {vacancy_id}")


@dataclass
class ProposalPage:
    items: List[Proposal] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 10

    @property
    def pages(self) -> int:
        return page_count(self.total, self.per_page)


def _is_pair_violation(exc: IntegrityError) -> bool:
    """Tell the pair constraint apart from other integrity failures (e.g. FKs)."""
    text = str(exc.orig)
    if UNIQUE_PAIR_CONSTRAINT in text:
        return True
    # SQLite reports the columns instead of the constraint name
    return "UNIQUE constraint failed" in text and "proposals.candidate_id" in text


class ProposalStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self,
        *,
        vacancy_id: int,
        candidate_id: int,
        initiator: ActorKind,
        message: str,
    ) -> Proposal:
        """Insert a SENT proposal, raising DuplicateProposalError on a live pair."""
        proposal = Proposal(
            vacancy_id=vacancy_id,
            candidate_id=candidate_id,
            initiator=initiator.value,
            status=ProposalStatus.SENT.value,
            message=message,
        )
        self.db.add(proposal)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            if _is_pair_violation(exc):
                logger.info(
                    "duplicate_proposal_rejected",
                    candidate_id=candidate_id,
                    vacancy_id=vacancy_id,
                )
                raise DuplicateProposalError(candidate_id, vacancy_id) from exc
            raise
        return proposal

    async def get(self, proposal_id: int) -> Optional[Proposal]:
        return await self.db.get(Proposal, proposal_id, populate_existing=True)

    async def transition(
        self,
        proposal_id: int,
        to_status: ProposalStatus,
        response_message: Optional[str] = None,
    ) -> bool:
        """Move a SENT proposal to ``to_status``. Returns False if it was not SENT."""
        now = datetime.utcnow()
        result = await self.db.execute(
            update(Proposal)
            .where(
                Proposal.id == proposal_id,
                Proposal.status == ProposalStatus.SENT.value,
            )
            .values(
                status=to_status.value,
                response_message=response_message,
                responded_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete_if_sent(self, proposal_id: int) -> bool:
        """Hard-delete a SENT proposal. Returns False if it was not SENT."""
        result = await self.db.execute(
            delete(Proposal)
            .where(
                Proposal.id == proposal_id,
                Proposal.status == ProposalStatus.SENT.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_page(
        self,
        *,
        initiator: ActorKind,
        candidate_id: Optional[int] = None,
        vacancy_ids: Optional[Sequence[int]] = None,
        status: Optional[ProposalStatus] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> ProposalPage:
        """Most recent first; ties on ``created_at`` fall back to id."""
        filters = [Proposal.initiator == initiator.value]
        if candidate_id is not None:
            filters.append(Proposal.candidate_id == candidate_id)
        if vacancy_ids is not None:
            filters.append(Proposal.vacancy_id.in_(list(vacancy_ids)))
        if status is not None:
            filters.append(Proposal.status == status.value)

        count_result = await self.db.execute(select(func.count(Proposal.id)).where(*filters))
        total = count_result.scalar_one()

        pagination = paginate_query(page, per_page)
        result = await self.db.execute(
            select(Proposal)
            .where(*filters)
            .order_by(Proposal.created_at.desc(), Proposal.id.desc())
            .offset(pagination["offset"])
            .limit(pagination["limit"])
        )
        return ProposalPage(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            per_page=per_page,
        )

    async def commit(self) -> None:
        await self.db.commit()
