"""Proposal schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from proapoio.utils.constants import ActorKind, ProposalStatus


class ProposalCreate(BaseModel):
    """Body of ``POST /propostas``.

    Length rules on ``mensagem`` are applied after HTML sanitization by the
    engine, so only the type is checked here.
    """
    id_vaga: int
    id_candidato: int
    mensagem: str


class ProposalReply(BaseModel):
    """Optional body of the accept/reject endpoints."""
    mensagem_resposta: Optional[str] = Field(None, max_length=2000)


class ContactInfo(BaseModel):
    email: Optional[str] = None
    telefone: Optional[str] = None


class InstitutionSummary(BaseModel):
    id: int
    nome: str


class VacancySummary(BaseModel):
    id: int
    titulo: str
    status: str
    instituicao: InstitutionSummary


class CandidateSummary(BaseModel):
    id: int
    nome: str


class ProposalResponse(BaseModel):
    id_proposta: int
    id_vaga: int
    id_candidato: int
    iniciador: ActorKind
    status: ProposalStatus
    mensagem: str
    mensagem_resposta: Optional[str] = None
    data_envio: Optional[datetime] = None
    data_resposta: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    vaga: Optional[VacancySummary] = None
    candidato: Optional[CandidateSummary] = None
    # Only present once the proposal is ACEITA
    contatos: Optional[ContactInfo] = None


class ProposalEnvelope(BaseModel):
    message: str
    proposta: ProposalResponse
    contatos: Optional[ContactInfo] = None


class ProposalListResponse(BaseModel):
    """Paginated proposal list."""
    items: List[ProposalResponse]
    total: int
    page: int
    per_page: int
    pages: int


class MessageResponse(BaseModel):
    message: str
