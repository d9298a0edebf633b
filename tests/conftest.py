# tests/conftest.py
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FORMAT"] = "console"
os.environ["SENTRY_DSN"] = ""

from dataclasses import dataclass
from datetime import datetime
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from proapoio.core.security import create_access_token
from proapoio.db.base import Base
from proapoio.db.session import get_db
from proapoio.main import app
from proapoio.models import Candidate, Institution, User, Vacancy
from proapoio.services.identity import Actor
from proapoio.utils.constants import ActorKind, UserType, VacancyStatus


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@dataclass
class World:
    """Seeded users, profiles and vacancies shared by the tests."""

    candidate_1: Candidate
    candidate_2: Candidate
    institution_1: Institution
    institution_2: Institution
    open_vacancy: Vacancy
    second_open_vacancy: Vacancy
    paused_vacancy: Vacancy
    closed_vacancy: Vacancy
    deleted_vacancy: Vacancy
    other_open_vacancy: Vacancy
    admin: User
    inactive_candidate_user: User

    def actor(self, profile) -> Actor:
        kind = ActorKind.CANDIDATE if isinstance(profile, Candidate) else ActorKind.INSTITUTION
        return Actor(kind=kind, id=profile.id)

    def headers(self, profile_or_user) -> Dict[str, str]:
        user_id = profile_or_user.id if isinstance(profile_or_user, User) else profile_or_user.user_id
        token = create_access_token({"sub": str(user_id)})
        return {"Authorization": f"Bearer {token}"}


async def seed_world(session: AsyncSession) -> World:
    def user(email, user_type, is_active=True):
        u = User(email=email, user_type=user_type.value, is_active=is_active)
        session.add(u)
        return u

    u_c1 = user("ana@example.com", UserType.CANDIDATE)
    u_c2 = user("bruno@example.com", UserType.CANDIDATE)
    u_i1 = user("contato@escola-aurora.edu.br", UserType.INSTITUTION)
    u_i2 = user("rh@colegio-horizonte.edu.br", UserType.INSTITUTION)
    u_admin = user("admin@proapoio.com", UserType.ADMIN)
    u_inactive = user("inativo@example.com", UserType.CANDIDATE, is_active=False)
    await session.flush()

    c1 = Candidate(user_id=u_c1.id, full_name="Ana Souza", phone="11988887777", cpf="12345678901")
    c2 = Candidate(user_id=u_c2.id, full_name="Bruno Lima", phone="21977776666", cpf="98765432100")
    inactive = Candidate(user_id=u_inactive.id, full_name="Carla Inativa", phone="31966665555")
    i1 = Institution(
        user_id=u_i1.id,
        trade_name="Escola Aurora",
        cnpj="11222333000181",
        corporate_mobile="11999990000",
        landline_phone="1133334444",
    )
    i2 = Institution(
        user_id=u_i2.id,
        trade_name="Colégio Horizonte",
        cnpj="44555666000199",
        corporate_mobile=None,
        landline_phone="2122223333",
    )
    session.add_all([c1, c2, inactive, i1, i2])
    await session.flush()

    def vacancy(institution, title, status=VacancyStatus.OPEN, deleted=False):
        v = Vacancy(
            institution_id=institution.id,
            title=title,
            status=status.value,
            deleted_at=datetime.utcnow() if deleted else None,
        )
        session.add(v)
        return v

    v_open = vacancy(i1, "Agente de apoio - manhã")
    v_open_2 = vacancy(i1, "Agente de apoio - tarde")
    v_paused = vacancy(i1, "Agente de apoio - noite", status=VacancyStatus.PAUSED)
    v_closed = vacancy(i1, "Agente de apoio - sábado", status=VacancyStatus.CLOSED)
    v_deleted = vacancy(i1, "Vaga removida", deleted=True)
    v_other = vacancy(i2, "Mediador escolar")
    await session.commit()

    return World(
        candidate_1=c1,
        candidate_2=c2,
        institution_1=i1,
        institution_2=i2,
        open_vacancy=v_open,
        second_open_vacancy=v_open_2,
        paused_vacancy=v_paused,
        closed_vacancy=v_closed,
        deleted_vacancy=v_deleted,
        other_open_vacancy=v_other,
        admin=u_admin,
        inactive_candidate_user=u_inactive,
    )


@pytest_asyncio.fixture(scope="function")
async def world(session_factory) -> World:
    async with session_factory() as session:
        return await seed_world(session)
