"""Vacancy Gate: is a vacancy open for proposals, and who owns it?"""

from dataclasses import dataclass
from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from proapoio.models.vacancy import Vacancy
from proapoio.utils.constants import VacancyStatus


@dataclass(frozen=True)
class VacancyInfo:
    """Snapshot of a vacancy; ``exists`` is False for missing and soft-deleted rows."""

    vacancy_id: int
    exists: bool
    owner_institution_id: Optional[int] = None
    status: Optional[str] = None

    @property
    def accepts_proposals(self) -> bool:
        """Only live ATIVA vacancies take new proposals."""
        return self.exists and self.status == VacancyStatus.OPEN


class VacancyGate(Protocol):
    async def get_vacancy_status(self, vacancy_id: int) -> VacancyInfo:
        ...

    async def owned_vacancy_ids(self, institution_id: int) -> List[int]:
        ...


class SqlVacancyGate:
    """Reads vacancy ownership and status from the ``vacancies`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_vacancy_status(self, vacancy_id: int) -> VacancyInfo:
        result = await self.db.execute(
            select(Vacancy.institution_id, Vacancy.status, Vacancy.deleted_at).where(
                Vacancy.id == vacancy_id
            )
        )
        row = result.one_or_none()
        if row is None:
            return VacancyInfo(vacancy_id=vacancy_id, exists=False)

        institution_id, status, deleted_at = row
        # Soft-deleted vacancies still report their owner so existing
        # proposals keep resolving their parties.
        return VacancyInfo(
            vacancy_id=vacancy_id,
            exists=deleted_at is None,
            owner_institution_id=institution_id,
            status=status,
        )

    async def owned_vacancy_ids(self, institution_id: int) -> List[int]:
        """Every vacancy of the institution, soft-deleted ones included."""
        result = await self.db.execute(
            select(Vacancy.id).where(Vacancy.institution_id == institution_id)
        )
        return [row[0] for row in result.fetchall()]
