"""
Proposals API
Candidates and institutions send, answer and withdraw proposals
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from proapoio.api.deps import get_current_actor, get_proposal_engine
from proapoio.schemas.proposal import (
    MessageResponse,
    ProposalCreate,
    ProposalEnvelope,
    ProposalListResponse,
    ProposalReply,
    ProposalResponse,
)
from proapoio.services.identity import Actor
from proapoio.services.proposal_engine import ProposalLifecycleEngine
from proapoio.utils.constants import ListingDirection, ProposalStatus

router = APIRouter()


@router.get("", response_model=ProposalListResponse, response_model_exclude_unset=True)
async def list_proposals(
    tipo: ListingDirection = Query(ListingDirection.SENT),
    status_filter: Optional[ProposalStatus] = Query(None, alias="status"),
    page: int = Query(1),
    per_page: Optional[int] = Query(None),
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    List proposals sent or received by the current user

    **Auth**: Candidate or Institution (JWT required)

    Most recent first. `tipo=enviadas` lists proposals the user sent,
    `tipo=recebidas` the ones addressed to them.
    """
    return await engine.list(
        actor,
        direction=tipo,
        status=status_filter,
        page=page,
        per_page=per_page,
    )


@router.post(
    "",
    response_model=ProposalEnvelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_proposal(
    proposal_in: ProposalCreate,
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    Send a proposal

    **Auth**: Candidate or Institution (JWT required)

    A candidate can only propose in their own name; an institution only on
    its own vacancies. The vacancy must be ATIVA and the pair must not
    already have a proposal.
    """
    proposta = await engine.create(
        actor,
        vacancy_id=proposal_in.id_vaga,
        candidate_id=proposal_in.id_candidato,
        message=proposal_in.mensagem,
    )
    return {"message": "Proposta enviada", "proposta": proposta}


@router.get("/{proposal_id}", response_model=ProposalResponse, response_model_exclude_unset=True)
async def get_proposal(
    proposal_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    Get a proposal

    **Auth**: the candidate or the institution owning the vacancy

    Contacts of the other party are only included once the proposal is accepted.
    """
    return await engine.get(actor, proposal_id)


@router.put("/{proposal_id}/aceitar", response_model=ProposalEnvelope, response_model_exclude_unset=True)
async def accept_proposal(
    proposal_id: int,
    reply: Optional[ProposalReply] = None,
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    Accept a proposal

    **Auth**: the recipient of the proposal
    """
    proposta = await engine.accept(
        actor,
        proposal_id,
        response_message=reply.mensagem_resposta if reply else None,
    )
    return {
        "message": "Proposta aceita",
        "proposta": proposta,
        "contatos": proposta.get("contatos"),
    }


@router.put("/{proposal_id}/recusar", response_model=ProposalEnvelope, response_model_exclude_unset=True)
async def reject_proposal(
    proposal_id: int,
    reply: Optional[ProposalReply] = None,
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    Reject a proposal

    **Auth**: the recipient of the proposal
    """
    proposta = await engine.reject(
        actor,
        proposal_id,
        response_message=reply.mensagem_resposta if reply else None,
    )
    return {"message": "Proposta recusada", "proposta": proposta}


@router.delete("/{proposal_id}", response_model=MessageResponse)
async def cancel_proposal(
    proposal_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: ProposalLifecycleEngine = Depends(get_proposal_engine),
):
    """
    Cancel a proposal that has not been answered yet

    **Auth**: the sender of the proposal
    """
    await engine.cancel(actor, proposal_id)
    return {"message": "Proposta cancelada"}
