"""Proposal Lifecycle Engine.

Validates creation, enforces the ENVIADA -> ACEITA/RECUSADA state machine,
decides who may act and hands every response through the contact
disclosure filter.

Check ordering for an existing proposal: existence (404), party (403), then
for accept/reject the state (422) before the recipient check (403); for
cancel the initiator check (403) before the state (422).
"""

from typing import Any, Dict, List, Optional, Tuple

import structlog

from proapoio.config import settings
from proapoio.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from proapoio.models.proposal import Proposal
from proapoio.services.contact_disclosure import ContactDirectory, ContactDisclosureFilter
from proapoio.services.identity import Actor
from proapoio.services.proposal_notifier import ProposalNotifier
from proapoio.services.proposal_roles import (
    is_initiator,
    is_party,
    is_recipient,
    listing_initiator,
    party_for,
    recipient_kind,
)
from proapoio.services.proposal_store import DuplicateProposalError, ProposalStore
from proapoio.services.vacancy_gate import VacancyGate
from proapoio.utils.constants import ListingDirection, ProposalStatus
from proapoio.utils.helpers import sanitize_optional_text, strip_html

logger = structlog.get_logger(__name__)

MSG_PROPOSAL_NOT_FOUND = "Proposta não encontrada."
MSG_DUPLICATE = "Já existe uma proposta para este candidato nesta vaga."
MSG_VACANCY_UNAVAILABLE = "A vaga não está disponível para propostas."
MSG_VACANCY_NOT_OWNED = "Vaga não pertence à instituição."
MSG_CANDIDATE_INVALID = "Candidato inválido."
MSG_CANDIDATE_NOT_FOUND = "Candidato não encontrado."
MSG_ONLY_RECIPIENT = "Apenas o destinatário pode responder à proposta."
MSG_ONLY_INITIATOR = "Apenas quem enviou a proposta pode cancelá-la."


class ProposalLifecycleEngine:
    def __init__(
        self,
        store: ProposalStore,
        vacancy_gate: VacancyGate,
        contacts: ContactDirectory,
        notifier: ProposalNotifier,
    ):
        self.store = store
        self.vacancy_gate = vacancy_gate
        self.contacts = contacts
        self.notifier = notifier
        self.disclosure = ContactDisclosureFilter(contacts)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self,
        actor: Actor,
        vacancy_id: int,
        candidate_id: int,
        message: Optional[str],
    ) -> Dict[str, Any]:
        """Send a new proposal (status ENVIADA) on behalf of ``actor``.

        All field problems are collected and raised together as a single
        ValidationError. A live proposal for the same pair is reported on
        ``id_vaga``.
        """
        errors: Dict[str, List[str]] = {}

        clean_message = strip_html(message)
        message_error = self._message_error(clean_message)
        if message_error:
            errors.setdefault("mensagem", []).append(message_error)

        if actor.is_candidate and candidate_id != actor.id:
            errors.setdefault("id_candidato", []).append(MSG_CANDIDATE_INVALID)
        elif not await self.contacts.candidate_exists(candidate_id):
            errors.setdefault("id_candidato", []).append(MSG_CANDIDATE_NOT_FOUND)

        vacancy = await self.vacancy_gate.get_vacancy_status(vacancy_id)
        if not vacancy.accepts_proposals:
            errors.setdefault("id_vaga", []).append(MSG_VACANCY_UNAVAILABLE)
        elif actor.is_institution and vacancy.owner_institution_id != actor.id:
            errors.setdefault("id_vaga", []).append(MSG_VACANCY_NOT_OWNED)

        if errors:
            logger.info(
                "proposal_create_rejected",
                actor_kind=actor.kind.value,
                actor_id=actor.id,
                fields=sorted(errors),
            )
            raise ValidationError(errors)

        try:
            proposal = await self.store.add(
                vacancy_id=vacancy_id,
                candidate_id=candidate_id,
                initiator=actor.kind,
                message=clean_message,
            )
        except DuplicateProposalError:
            raise ValidationError.for_field("id_vaga", MSG_DUPLICATE)
        await self.store.commit()

        logger.info(
            "proposal_sent",
            proposal_id=proposal.id,
            vacancy_id=vacancy_id,
            candidate_id=candidate_id,
            initiator=actor.kind.value,
        )
        recipient = party_for(recipient_kind(actor.kind), candidate_id, vacancy.owner_institution_id)
        await self.notifier.proposal_created(proposal, recipient)

        return await self.disclosure.project(proposal, actor, vacancy.owner_institution_id)

    def _message_error(self, message: str) -> Optional[str]:
        if not message:
            return "O campo mensagem é obrigatório."
        if len(message) < settings.PROPOSAL_MESSAGE_MIN_LENGTH:
            return f"A mensagem deve ter pelo menos {settings.PROPOSAL_MESSAGE_MIN_LENGTH} caracteres."
        if len(message) > settings.PROPOSAL_MESSAGE_MAX_LENGTH:
            return f"A mensagem deve ter no máximo {settings.PROPOSAL_MESSAGE_MAX_LENGTH} caracteres."
        return None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def accept(
        self,
        actor: Actor,
        proposal_id: int,
        response_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._respond(actor, proposal_id, ProposalStatus.ACCEPTED, response_message)

    async def reject(
        self,
        actor: Actor,
        proposal_id: int,
        response_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._respond(actor, proposal_id, ProposalStatus.REJECTED, response_message)

    async def _respond(
        self,
        actor: Actor,
        proposal_id: int,
        to_status: ProposalStatus,
        response_message: Optional[str],
    ) -> Dict[str, Any]:
        proposal, owner_id = await self._load_for_party(actor, proposal_id)

        if proposal.status != ProposalStatus.SENT:
            raise StateConflictError()
        if not is_recipient(actor, proposal.initiator, proposal.candidate_id, owner_id):
            raise AuthorizationError(MSG_ONLY_RECIPIENT)

        updated = await self.store.transition(
            proposal_id,
            to_status,
            response_message=sanitize_optional_text(response_message),
        )
        if not updated:
            await self._raise_lost_race(proposal_id)
        await self.store.commit()

        proposal = await self.store.get(proposal_id)
        logger.info(
            "proposal_answered",
            proposal_id=proposal_id,
            status=to_status.value,
            actor_kind=actor.kind.value,
            actor_id=actor.id,
        )

        initiator = party_for(proposal.initiator, proposal.candidate_id, owner_id)
        if to_status == ProposalStatus.ACCEPTED:
            await self.notifier.proposal_accepted(proposal, initiator)
        else:
            await self.notifier.proposal_rejected(proposal, initiator)

        return await self.disclosure.project(proposal, actor, owner_id)

    async def cancel(self, actor: Actor, proposal_id: int) -> None:
        """Withdraw a proposal still ENVIADA. The row is deleted, freeing the pair."""
        proposal, owner_id = await self._load_for_party(actor, proposal_id)

        if not is_initiator(actor, proposal.initiator, proposal.candidate_id, owner_id):
            raise AuthorizationError(MSG_ONLY_INITIATOR)
        if proposal.status != ProposalStatus.SENT:
            raise StateConflictError()

        deleted = await self.store.delete_if_sent(proposal_id)
        if not deleted:
            await self._raise_lost_race(proposal_id)
        await self.store.commit()

        logger.info(
            "proposal_cancelled",
            proposal_id=proposal_id,
            actor_kind=actor.kind.value,
            actor_id=actor.id,
        )

    async def _raise_lost_race(self, proposal_id: int) -> None:
        """A compare-and-set affected no rows: tell a deleted row from a finished one."""
        current = await self.store.get(proposal_id)
        if current is None:
            raise NotFoundError(MSG_PROPOSAL_NOT_FOUND)
        logger.info("proposal_transition_conflict", proposal_id=proposal_id, status=current.status)
        raise StateConflictError()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, actor: Actor, proposal_id: int) -> Dict[str, Any]:
        proposal, owner_id = await self._load_for_party(actor, proposal_id)
        return await self.disclosure.project(proposal, actor, owner_id)

    async def list(
        self,
        actor: Actor,
        direction: ListingDirection = ListingDirection.SENT,
        status: Optional[ProposalStatus] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Proposals sent or received by ``actor``, most recent first."""
        page = max(page, 1)
        per_page = safe_per_page(per_page)
        initiator = listing_initiator(actor.kind, direction)

        if actor.is_candidate:
            result = await self.store.list_page(
                initiator=initiator,
                candidate_id=actor.id,
                status=status,
                page=page,
                per_page=per_page,
            )
        else:
            vacancy_ids = await self.vacancy_gate.owned_vacancy_ids(actor.id)
            result = await self.store.list_page(
                initiator=initiator,
                vacancy_ids=vacancy_ids,
                status=status,
                page=page,
                per_page=per_page,
            )

        owner_ids = {}
        for proposal in result.items:
            owner_ids[proposal.id] = await self._owner_for_viewer(actor, proposal)
        items = await self.disclosure.project_all(result.items, actor, owner_ids)

        return {
            "items": items,
            "total": result.total,
            "page": result.page,
            "per_page": result.per_page,
            "pages": result.pages,
        }

    async def _owner_for_viewer(self, actor: Actor, proposal: Proposal) -> Optional[int]:
        # Institutions only ever see proposals on their own vacancies
        if actor.is_institution:
            return actor.id
        if proposal.status != ProposalStatus.ACCEPTED:
            return None
        vacancy = await self.vacancy_gate.get_vacancy_status(proposal.vacancy_id)
        return vacancy.owner_institution_id

    async def _load_for_party(self, actor: Actor, proposal_id: int) -> Tuple[Proposal, Optional[int]]:
        proposal = await self.store.get(proposal_id)
        if proposal is None:
            raise NotFoundError(MSG_PROPOSAL_NOT_FOUND)

        vacancy = await self.vacancy_gate.get_vacancy_status(proposal.vacancy_id)
        owner_id = vacancy.owner_institution_id
        if not is_party(actor, proposal.candidate_id, owner_id):
            logger.info(
                "proposal_access_denied",
                proposal_id=proposal_id,
                actor_kind=actor.kind.value,
                actor_id=actor.id,
            )
            raise AuthorizationError()
        return proposal, owner_id


def safe_per_page(per_page: Optional[int]) -> int:
    """``per_page`` when it lies in ``1..MAX_PAGE_SIZE``, otherwise the default."""
    if not per_page or per_page < 1 or per_page > settings.MAX_PAGE_SIZE:
        return settings.DEFAULT_PAGE_SIZE
    return per_page
