import pytest

from proapoio.services.proposal_store import DuplicateProposalError, ProposalStore
from proapoio.utils.constants import ActorKind, ProposalStatus

pytestmark = pytest.mark.asyncio


async def add_sent(store, world, vacancy=None, candidate=None, initiator=ActorKind.CANDIDATE):
    proposal = await store.add(
        vacancy_id=(vacancy or world.open_vacancy).id,
        candidate_id=(candidate or world.candidate_1).id,
        initiator=initiator,
        message="Tenho interesse na vaga",
    )
    await store.commit()
    return proposal


async def test_add_creates_sent_proposal(db_session, world):
    store = ProposalStore(db_session)
    proposal = await add_sent(store, world)

    assert proposal.id is not None
    assert proposal.status == ProposalStatus.SENT
    assert proposal.initiator == ActorKind.CANDIDATE
    assert proposal.created_at is not None
    assert proposal.responded_at is None


async def test_add_rejects_second_live_proposal_for_pair(db_session, world):
    store = ProposalStore(db_session)
    await add_sent(store, world)

    with pytest.raises(DuplicateProposalError):
        await add_sent(store, world, initiator=ActorKind.INSTITUTION)

    # Session is usable again after the failed insert
    other = await add_sent(store, world, candidate=world.candidate_2)
    assert other.id is not None


async def test_transition_only_from_sent(db_session, world):
    store = ProposalStore(db_session)
    proposal = await add_sent(store, world)

    assert await store.transition(proposal.id, ProposalStatus.ACCEPTED, response_message="Bem-vinda")
    await store.commit()
    assert not await store.transition(proposal.id, ProposalStatus.REJECTED)

    current = await store.get(proposal.id)
    assert current.status == ProposalStatus.ACCEPTED
    assert current.response_message == "Bem-vinda"
    assert current.responded_at is not None


async def test_delete_if_sent_frees_the_pair(db_session, session_factory, world):
    store = ProposalStore(db_session)
    proposal = await add_sent(store, world)

    assert await store.delete_if_sent(proposal.id)
    await store.commit()
    assert await store.get(proposal.id) is None
    assert not await store.delete_if_sent(proposal.id)
    await store.commit()

    async with session_factory() as session:
        again = await add_sent(ProposalStore(session), world)
        assert again.status == ProposalStatus.SENT


async def test_delete_if_sent_keeps_answered_proposals(db_session, world):
    store = ProposalStore(db_session)
    proposal = await add_sent(store, world)
    await store.transition(proposal.id, ProposalStatus.REJECTED)
    await store.commit()

    assert not await store.delete_if_sent(proposal.id)
    assert await store.get(proposal.id) is not None


async def test_list_page_filters_and_orders(db_session, world):
    store = ProposalStore(db_session)
    first = await add_sent(store, world, vacancy=world.open_vacancy)
    second = await add_sent(store, world, vacancy=world.second_open_vacancy)
    third = await add_sent(store, world, vacancy=world.other_open_vacancy)
    await add_sent(store, world, candidate=world.candidate_2)

    page = await store.list_page(initiator=ActorKind.CANDIDATE, candidate_id=world.candidate_1.id, per_page=2)
    assert page.total == 3
    assert page.pages == 2
    assert [p.id for p in page.items] == [third.id, second.id]

    page_2 = await store.list_page(
        initiator=ActorKind.CANDIDATE, candidate_id=world.candidate_1.id, page=2, per_page=2
    )
    assert [p.id for p in page_2.items] == [first.id]


async def test_list_page_by_vacancies_and_status(db_session, world):
    store = ProposalStore(db_session)
    accepted = await add_sent(store, world)
    await add_sent(store, world, candidate=world.candidate_2)
    await store.transition(accepted.id, ProposalStatus.ACCEPTED)
    await store.commit()

    page = await store.list_page(
        initiator=ActorKind.CANDIDATE,
        vacancy_ids=[world.open_vacancy.id],
        status=ProposalStatus.ACCEPTED,
    )
    assert [p.id for p in page.items] == [accepted.id]

    empty = await store.list_page(initiator=ActorKind.CANDIDATE, vacancy_ids=[])
    assert empty.total == 0
    assert empty.items == []
