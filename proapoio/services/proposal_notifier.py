"""Proposal lifecycle notifications.

New proposals notify the recipient; accepted and rejected proposals notify
the initiator. Delivery (e-mail, in-app inbox) is handled elsewhere; the
default notifier records the events in the structured log.
"""

from typing import Optional, Protocol

import structlog

from proapoio.models.proposal import Proposal
from proapoio.services.identity import Actor

logger = structlog.get_logger(__name__)


class ProposalNotifier(Protocol):
    async def proposal_created(self, proposal: Proposal, recipient: Optional[Actor]) -> None:
        ...

    async def proposal_accepted(self, proposal: Proposal, initiator: Optional[Actor]) -> None:
        ...

    async def proposal_rejected(self, proposal: Proposal, initiator: Optional[Actor]) -> None:
        ...


class LoggingProposalNotifier:
    async def proposal_created(self, proposal: Proposal, recipient: Optional[Actor]) -> None:
        self._emit("proposal_created", proposal, recipient)

    async def proposal_accepted(self, proposal: Proposal, initiator: Optional[Actor]) -> None:
        self._emit("proposal_accepted", proposal, initiator)

    async def proposal_rejected(self, proposal: Proposal, initiator: Optional[Actor]) -> None:
        self._emit("proposal_rejected", proposal, initiator)

    def _emit(self, event: str, proposal: Proposal, target: Optional[Actor]) -> None:
        if target is None:
            logger.warning(
                "proposal_notification_without_target",
                notification=event,
                proposal_id=proposal.id,
            )
            return
        logger.info(
            event,
            proposal_id=proposal.id,
            vacancy_id=proposal.vacancy_id,
            candidate_id=proposal.candidate_id,
            notify_kind=target.kind.value,
            notify_id=target.id,
        )
