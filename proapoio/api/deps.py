"""
API Dependencies
Common dependencies for API endpoints (authentication, engine wiring)
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from proapoio.core.exceptions import AuthenticationError
from proapoio.db.session import get_db
from proapoio.services.contact_disclosure import SqlContactDirectory
from proapoio.services.identity import Actor, SqlIdentityResolver
from proapoio.services.proposal_engine import ProposalLifecycleEngine
from proapoio.services.proposal_notifier import LoggingProposalNotifier
from proapoio.services.proposal_store import ProposalStore
from proapoio.services.vacancy_gate import SqlVacancyGate

# Bearer JWT; missing credentials are reported by get_current_actor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    """
    Resolve the bearer token to the acting candidate or institution
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return await SqlIdentityResolver(db).resolve(credentials.credentials)


async def get_proposal_engine(db: AsyncSession = Depends(get_db)) -> ProposalLifecycleEngine:
    """
    Proposal engine bound to the request's database session
    """
    return ProposalLifecycleEngine(
        store=ProposalStore(db),
        vacancy_gate=SqlVacancyGate(db),
        contacts=SqlContactDirectory(db),
        notifier=LoggingProposalNotifier(),
    )
