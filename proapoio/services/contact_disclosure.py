"""Contact Disclosure Filter.

A proposal is projected into its response payload together with public
summaries of its vacancy (``vaga``) and candidate (``candidato``). The
counterpart's contacts (``contatos``) are added only once the proposal is
ACCEPTED. Before that the key is absent, not null. Identity numbers
(CPF/CNPJ), e-mails and phones never appear in the summaries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from proapoio.models.candidate import Candidate
from proapoio.models.institution import Institution
from proapoio.models.proposal import Proposal
from proapoio.models.user import User
from proapoio.models.vacancy import Vacancy
from proapoio.services.identity import Actor
from proapoio.services.proposal_roles import opposite_kind, party_for
from proapoio.utils.constants import ActorKind, ProposalStatus


@dataclass(frozen=True)
class ContactCard:
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactDirectory(Protocol):
    async def candidate_exists(self, candidate_id: int) -> bool:
        ...

    async def candidate_contacts(self, candidate_id: int) -> ContactCard:
        ...

    async def institution_contacts(self, institution_id: int) -> ContactCard:
        ...

    async def vacancy_summaries(self, vacancy_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        ...

    async def candidate_summaries(self, candidate_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        ...


class SqlContactDirectory:
    """Reads contact cards and public summaries from the profile tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def candidate_exists(self, candidate_id: int) -> bool:
        result = await self.db.execute(
            select(Candidate.id).where(
                Candidate.id == candidate_id,
                Candidate.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none() is not None

    async def candidate_contacts(self, candidate_id: int) -> ContactCard:
        result = await self.db.execute(
            select(User.email, Candidate.phone)
            .join(User, User.id == Candidate.user_id)
            .where(Candidate.id == candidate_id)
        )
        row = result.one_or_none()
        if row is None:
            return ContactCard()
        return ContactCard(email=row.email, phone=row.phone)

    async def institution_contacts(self, institution_id: int) -> ContactCard:
        result = await self.db.execute(
            select(User.email, Institution.corporate_mobile, Institution.landline_phone)
            .join(User, User.id == Institution.user_id)
            .where(Institution.id == institution_id)
        )
        row = result.one_or_none()
        if row is None:
            return ContactCard()
        return ContactCard(email=row.email, phone=row.corporate_mobile or row.landline_phone)

    async def vacancy_summaries(self, vacancy_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        """Title, status and owning institution of each vacancy, soft-deleted ones included."""
        ids = list(set(vacancy_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(Vacancy.id, Vacancy.title, Vacancy.status, Institution.id, Institution.trade_name)
            .join(Institution, Institution.id == Vacancy.institution_id)
            .where(Vacancy.id.in_(ids))
        )
        return {
            vacancy_id: vacancy_summary(vacancy_id, title, status, institution_id, trade_name)
            for vacancy_id, title, status, institution_id, trade_name in result.all()
        }

    async def candidate_summaries(self, candidate_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        ids = list(set(candidate_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(Candidate.id, Candidate.full_name).where(Candidate.id.in_(ids))
        )
        return {
            candidate_id: candidate_summary(candidate_id, full_name)
            for candidate_id, full_name in result.all()
        }


def vacancy_summary(
    vacancy_id: int,
    title: str,
    status: str,
    institution_id: int,
    institution_name: str,
) -> Dict[str, Any]:
    return {
        "id": vacancy_id,
        "titulo": title,
        "status": status,
        "instituicao": {"id": institution_id, "nome": institution_name},
    }


def candidate_summary(candidate_id: int, full_name: str) -> Dict[str, Any]:
    return {"id": candidate_id, "nome": full_name}


def should_disclose(proposal: Proposal) -> bool:
    return proposal.status == ProposalStatus.ACCEPTED


def proposal_payload(proposal: Proposal) -> Dict[str, Any]:
    return {
        "id_proposta": proposal.id,
        "id_vaga": proposal.vacancy_id,
        "id_candidato": proposal.candidate_id,
        "iniciador": proposal.initiator,
        "status": proposal.status,
        "mensagem": proposal.message,
        "mensagem_resposta": proposal.response_message,
        "data_envio": proposal.created_at,
        "data_resposta": proposal.responded_at,
        "created_at": proposal.created_at,
        "updated_at": proposal.updated_at,
    }


def contact_payload(card: Optional[ContactCard]) -> Dict[str, Optional[str]]:
    card = card or ContactCard()
    return {"email": card.email, "telefone": card.phone}


def disclose(
    proposal: Proposal,
    counterpart_contacts: Optional[ContactCard],
    vacancy: Optional[Dict[str, Any]] = None,
    candidate: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build the payload, attaching ``contatos`` only for accepted proposals."""
    payload = proposal_payload(proposal)
    if vacancy is not None:
        payload["vaga"] = vacancy
    if candidate is not None:
        payload["candidato"] = candidate
    if should_disclose(proposal):
        payload["contatos"] = contact_payload(counterpart_contacts)
    return payload


class ContactDisclosureFilter:
    def __init__(self, directory: ContactDirectory):
        self.directory = directory

    async def counterpart_contacts(
        self,
        viewer: Actor,
        proposal: Proposal,
        owner_institution_id: Optional[int],
    ) -> Optional[ContactCard]:
        counterpart = party_for(opposite_kind(viewer.kind), proposal.candidate_id, owner_institution_id)
        if counterpart is None:
            return None
        if counterpart.kind == ActorKind.CANDIDATE:
            return await self.directory.candidate_contacts(counterpart.id)
        return await self.directory.institution_contacts(counterpart.id)

    async def project_all(
        self,
        proposals: List[Proposal],
        viewer: Actor,
        owner_ids: Dict[int, Optional[int]],
    ) -> List[Dict[str, Any]]:
        """Project a page of proposals; ``owner_ids`` maps proposal id to vacancy owner."""
        vacancies = await self.directory.vacancy_summaries(p.vacancy_id for p in proposals)
        candidates = await self.directory.candidate_summaries(p.candidate_id for p in proposals)

        items = []
        for proposal in proposals:
            contacts = None
            if should_disclose(proposal):
                contacts = await self.counterpart_contacts(viewer, proposal, owner_ids.get(proposal.id))
            items.append(
                disclose(
                    proposal,
                    contacts,
                    vacancy=vacancies.get(proposal.vacancy_id),
                    candidate=candidates.get(proposal.candidate_id),
                )
            )
        return items

    async def project(
        self,
        proposal: Proposal,
        viewer: Actor,
        owner_institution_id: Optional[int],
    ) -> Dict[str, Any]:
        items = await self.project_all([proposal], viewer, {proposal.id: owner_institution_id})
        return items[0]
