"""Identity resolution: authenticated session -> Actor."""

from dataclasses import dataclass
from typing import Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from proapoio.core.exceptions import AuthenticationError, AuthorizationError
from proapoio.core.security import decode_token
from proapoio.models.candidate import Candidate
from proapoio.models.institution import Institution
from proapoio.models.user import User
from proapoio.utils.constants import ActorKind, UserType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Actor:
    """Who is acting: a candidate or an institution, by profile id."""

    kind: ActorKind
    id: int

    @property
    def is_candidate(self) -> bool:
        return self.kind == ActorKind.CANDIDATE

    @property
    def is_institution(self) -> bool:
        return self.kind == ActorKind.INSTITUTION


class IdentityResolver(Protocol):
    async def resolve(self, token: str) -> Actor:
        ...


class SqlIdentityResolver:
    """Resolves a bearer token to the user's candidate or institution profile."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, token: str) -> Actor:
        payload = decode_token(token)

        sub = payload.get("sub")
        if sub is None:
            raise AuthenticationError("Token inválido ou expirado.")
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise AuthenticationError("Token inválido ou expirado.")

        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None or user.deleted_at is not None:
            raise AuthenticationError("Usuário não encontrado.")
        if not user.is_active:
            raise AuthorizationError("Usuário inativo.")

        if user.user_type == UserType.CANDIDATE:
            profile_model, kind = Candidate, ActorKind.CANDIDATE
        elif user.user_type == UserType.INSTITUTION:
            profile_model, kind = Institution, ActorKind.INSTITUTION
        else:
            logger.info("actor_type_not_allowed", user_id=user.id, user_type=user.user_type)
            raise AuthorizationError()

        result = await self.db.execute(
            select(profile_model.id).where(
                profile_model.user_id == user.id,
                profile_model.deleted_at.is_(None),
            )
        )
        profile_id = result.scalar_one_or_none()
        if profile_id is None:
            raise AuthorizationError("Perfil não encontrado.")

        return Actor(kind=kind, id=profile_id)
