"""Pure role functions for proposals.

The recipient of a proposal is never stored: it is the party whose kind is
the opposite of ``initiator``. Every check here depends only on
``(actor, initiator, vacancy owner, candidate_id)``.
"""

from typing import Optional, Union

from proapoio.services.identity import Actor
from proapoio.utils.constants import ActorKind, ListingDirection


def opposite_kind(kind: Union[ActorKind, str]) -> ActorKind:
    kind = ActorKind(kind)
    if kind == ActorKind.CANDIDATE:
        return ActorKind.INSTITUTION
    return ActorKind.CANDIDATE


def recipient_kind(initiator: Union[ActorKind, str]) -> ActorKind:
    return opposite_kind(initiator)


def party_for(kind: Union[ActorKind, str], candidate_id: int, owner_institution_id: Optional[int]) -> Optional[Actor]:
    """The party of the given kind on a proposal (None if the vacancy has no owner)."""
    kind = ActorKind(kind)
    if kind == ActorKind.CANDIDATE:
        return Actor(kind=kind, id=candidate_id)
    if owner_institution_id is None:
        return None
    return Actor(kind=kind, id=owner_institution_id)


def is_party(actor: Actor, candidate_id: int, owner_institution_id: Optional[int]) -> bool:
    return party_for(actor.kind, candidate_id, owner_institution_id) == actor


def is_initiator(
    actor: Actor,
    initiator: Union[ActorKind, str],
    candidate_id: int,
    owner_institution_id: Optional[int],
) -> bool:
    return actor.kind == ActorKind(initiator) and is_party(actor, candidate_id, owner_institution_id)


def is_recipient(
    actor: Actor,
    initiator: Union[ActorKind, str],
    candidate_id: int,
    owner_institution_id: Optional[int],
) -> bool:
    return actor.kind == recipient_kind(initiator) and is_party(actor, candidate_id, owner_institution_id)


def listing_initiator(actor_kind: Union[ActorKind, str], direction: ListingDirection) -> ActorKind:
    """Initiator value matching "sent by me" / "received by me" for an actor kind."""
    if direction == ListingDirection.SENT:
        return ActorKind(actor_kind)
    return opposite_kind(actor_kind)
