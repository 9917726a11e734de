"""Voting on odds.  Votes are append-only."""

import logging
from typing import Optional

from sarradabet.core.odds_math import potential_payout
from sarradabet.core.pagination import Page, PageParams
from sarradabet.errors import ConflictError, NotFoundError
from sarradabet.models import BET_STATUS_OPEN, Vote
from sarradabet.repositories.votes import VoteRepository
from sarradabet.services.base import BaseService
from sarradabet.services.events import (
    DEFAULT_STAKE,
    WAGER_ACCEPTED,
    EventGatewayClient,
    wager_accepted_payload,
)

logger = logging.getLogger(__name__)


class VoteService(BaseService):
    entity_name = "Vote"

    def __init__(self, repository: VoteRepository, events: Optional[EventGatewayClient] = None):
        super().__init__(repository)
        self.repository = repository
        self.events = events

    def find_all(
        self,
        params: Optional[PageParams] = None,
        odd_id: Optional[int] = None,
        bet_id: Optional[int] = None,
    ) -> Page[Vote]:
        return self.repository.find_filtered(params or PageParams(), odd_id=odd_id, bet_id=bet_id)

    def create(self, odd_id: int) -> Vote:
        self.validate_id(odd_id)
        odd = self.repository.find_odd(odd_id)
        if odd is None:
            raise NotFoundError("Odd", odd_id)
        if odd.bet.status != BET_STATUS_OPEN:
            raise ConflictError("Votes are only accepted on open bets")

        vote = self.repository.create_for_odd(odd_id)
        logger.info("Vote %d cast on odd %d (bet %d)", vote.id, odd_id, odd.bet_id)

        if self.events is not None:
            self.events.publish_quietly(
                WAGER_ACCEPTED,
                wager_accepted_payload(
                    wager_id=vote.id,
                    bet_id=odd.bet_id,
                    odd_id=odd_id,
                    stake=DEFAULT_STAKE,
                    potential_payout=potential_payout(DEFAULT_STAKE, odd.value),
                ),
            )
        return vote
