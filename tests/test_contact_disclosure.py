from datetime import datetime

import pytest

from proapoio.models.proposal import Proposal
from proapoio.services.contact_disclosure import (
    ContactCard,
    ContactDisclosureFilter,
    SqlContactDirectory,
    candidate_summary,
    disclose,
    proposal_payload,
    vacancy_summary,
)
from proapoio.services.identity import Actor
from proapoio.utils.constants import ActorKind, ProposalStatus

pytestmark = pytest.mark.asyncio


def make_proposal(status: ProposalStatus) -> Proposal:
    now = datetime.utcnow()
    return Proposal(
        id=7,
        vacancy_id=3,
        candidate_id=1,
        initiator=ActorKind.CANDIDATE.value,
        status=status.value,
        message="Tenho interesse na vaga",
        created_at=now,
        updated_at=now,
    )


class FakeDirectory:
    def __init__(self):
        self.calls = []

    async def candidate_exists(self, candidate_id):
        return True

    async def candidate_contacts(self, candidate_id):
        self.calls.append(("candidate", candidate_id))
        return ContactCard(email="ana@example.com", phone="11988887777")

    async def institution_contacts(self, institution_id):
        self.calls.append(("institution", institution_id))
        return ContactCard(email="contato@escola.edu.br", phone="11999990000")

    async def vacancy_summaries(self, vacancy_ids):
        return {
            vacancy_id: vacancy_summary(vacancy_id, "Agente de apoio", "ATIVA", 10, "Escola Aurora")
            for vacancy_id in vacancy_ids
        }

    async def candidate_summaries(self, candidate_ids):
        return {candidate_id: candidate_summary(candidate_id, "Ana Souza") for candidate_id in candidate_ids}


async def test_payload_uses_api_field_names():
    payload = proposal_payload(make_proposal(ProposalStatus.SENT))
    assert payload["id_proposta"] == 7
    assert payload["id_vaga"] == 3
    assert payload["id_candidato"] == 1
    assert payload["iniciador"] == "CANDIDATO"
    assert payload["data_envio"] == payload["created_at"]
    assert payload["data_resposta"] is None


@pytest.mark.parametrize("status", [ProposalStatus.SENT, ProposalStatus.REJECTED])
async def test_contacts_absent_unless_accepted(status):
    card = ContactCard(email="x@example.com", phone="1")
    assert "contatos" not in disclose(make_proposal(status), card)


async def test_contacts_present_when_accepted():
    payload = disclose(make_proposal(ProposalStatus.ACCEPTED), ContactCard(email="x@example.com"))
    assert payload["contatos"] == {"email": "x@example.com", "telefone": None}
    assert "cpf" not in payload["contatos"]


async def test_filter_shows_institution_contacts_to_candidate():
    directory = FakeDirectory()
    viewer = Actor(kind=ActorKind.CANDIDATE, id=1)
    payload = await ContactDisclosureFilter(directory).project(make_proposal(ProposalStatus.ACCEPTED), viewer, 10)

    assert directory.calls == [("institution", 10)]
    assert payload["contatos"]["email"] == "contato@escola.edu.br"


async def test_filter_shows_candidate_contacts_to_institution():
    directory = FakeDirectory()
    viewer = Actor(kind=ActorKind.INSTITUTION, id=10)
    payload = await ContactDisclosureFilter(directory).project(make_proposal(ProposalStatus.ACCEPTED), viewer, 10)

    assert directory.calls == [("candidate", 1)]
    assert payload["contatos"] == {"email": "ana@example.com", "telefone": "11988887777"}


async def test_filter_skips_lookup_when_not_accepted():
    directory = FakeDirectory()
    viewer = Actor(kind=ActorKind.INSTITUTION, id=10)
    payload = await ContactDisclosureFilter(directory).project(make_proposal(ProposalStatus.SENT), viewer, 10)

    assert directory.calls == []
    assert "contatos" not in payload


async def test_sql_directory_reads_candidate_card(db_session, world):
    card = await SqlContactDirectory(db_session).candidate_contacts(world.candidate_1.id)
    assert card == ContactCard(email="ana@example.com", phone="11988887777")


async def test_sql_directory_prefers_corporate_mobile(db_session, world):
    card = await SqlContactDirectory(db_session).institution_contacts(world.institution_1.id)
    assert card == ContactCard(email="contato@escola-aurora.edu.br", phone="11999990000")


async def test_sql_directory_falls_back_to_landline(db_session, world):
    card = await SqlContactDirectory(db_session).institution_contacts(world.institution_2.id)
    assert card.phone == "2122223333"


async def test_sql_directory_candidate_exists(db_session, world):
    directory = SqlContactDirectory(db_session)
    assert await directory.candidate_exists(world.candidate_1.id)
    assert not await directory.candidate_exists(9999)


SENSITIVE_KEYS = {"email", "telefone", "cpf", "cnpj", "phone"}


def nested_keys(value):
    if isinstance(value, dict):
        for key, item in value.items():
            yield key
            yield from nested_keys(item)


@pytest.mark.parametrize("status", [ProposalStatus.SENT, ProposalStatus.REJECTED])
async def test_summaries_carry_no_contact_fields(status):
    directory = FakeDirectory()
    viewer = Actor(kind=ActorKind.INSTITUTION, id=10)
    payload = await ContactDisclosureFilter(directory).project(make_proposal(status), viewer, 10)

    assert payload["vaga"] == {
        "id": 3,
        "titulo": "Agente de apoio",
        "status": "ATIVA",
        "instituicao": {"id": 10, "nome": "Escola Aurora"},
    }
    assert payload["candidato"] == {"id": 1, "nome": "Ana Souza"}
    assert not SENSITIVE_KEYS & set(nested_keys(payload))


async def test_project_all_keeps_order_and_owners():
    directory = FakeDirectory()
    viewer = Actor(kind=ActorKind.CANDIDATE, id=1)
    accepted = make_proposal(ProposalStatus.ACCEPTED)
    sent = make_proposal(ProposalStatus.SENT)
    sent.id = 8

    items = await ContactDisclosureFilter(directory).project_all([accepted, sent], viewer, {7: 10, 8: None})

    assert [item["id_proposta"] for item in items] == [7, 8]
    assert directory.calls == [("institution", 10)]
    assert "contatos" in items[0]
    assert "contatos" not in items[1]
    assert items[1]["vaga"]["titulo"] == "Agente de apoio"


async def test_sql_directory_vacancy_summaries(db_session, world):
    summaries = await SqlContactDirectory(db_session).vacancy_summaries(
        [world.open_vacancy.id, world.deleted_vacancy.id]
    )

    assert summaries[world.open_vacancy.id] == {
        "id": world.open_vacancy.id,
        "titulo": "Agente de apoio - manhã",
        "status": "ATIVA",
        "instituicao": {"id": world.institution_1.id, "nome": "Escola Aurora"},
    }
    assert summaries[world.deleted_vacancy.id]["titulo"] == "Vaga removida"


async def test_sql_directory_candidate_summaries(db_session, world):
    directory = SqlContactDirectory(db_session)
    summaries = await directory.candidate_summaries([world.candidate_1.id, world.candidate_2.id])

    assert summaries[world.candidate_1.id] == {"id": world.candidate_1.id, "nome": "Ana Souza"}
    assert summaries[world.candidate_2.id]["nome"] == "Bruno Lima"
    assert await directory.candidate_summaries([]) == {}
