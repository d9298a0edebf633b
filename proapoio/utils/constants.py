"""Common constants and enumerations shared by models and services."""

from enum import Enum


class ActorKind(str, Enum):
    """Kinds of authenticated actors; also the values of ``Proposal.initiator``."""

    CANDIDATE = "CANDIDATO"
    INSTITUTION = "INSTITUICAO"


class UserType(str, Enum):
    """Values of ``User.user_type``."""

    CANDIDATE = "CANDIDATO"
    INSTITUTION = "INSTITUICAO"
    ADMIN = "ADMIN"


class ProposalStatus(str, Enum):
    SENT = "ENVIADA"
    ACCEPTED = "ACEITA"
    REJECTED = "RECUSADA"


class VacancyStatus(str, Enum):
    OPEN = "ATIVA"
    PAUSED = "PAUSADA"
    CLOSED = "FECHADA"


class ListingDirection(str, Enum):
    """Orientation of ``GET /propostas``."""

    SENT = "enviadas"
    RECEIVED = "recebidas"

