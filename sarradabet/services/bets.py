"""
Bet lifecycle management.

State machine::

    open ──close──▶ closed ──resolve──▶ resolved
      └────────────resolve────────────────▲

``resolved`` is terminal.  Resolution settles every odd on the bet in a
single transaction: the winning odd becomes ``won`` and all of its
siblings ``lost``.
"""

import logging
from typing import List, Optional, Sequence

from sarradabet.core.odds_math import validate_odds_values
from sarradabet.core.pagination import Page, PageParams
from sarradabet.errors import BadRequestError, ConflictError, NotFoundError
from sarradabet.models import (
    BET_STATUS_CLOSED,
    BET_STATUS_OPEN,
    BET_STATUS_RESOLVED,
    BET_STATUSES,
    Bet,
)
from sarradabet.repositories.bets import BetRepository
from sarradabet.schemas import BetCreate, BetUpdate
from sarradabet.services.base import BaseService
from sarradabet.services.events import (
    BET_MARKET_CREATED,
    EventGatewayClient,
    bet_market_created_payload,
)

logger = logging.getLogger(__name__)

#: Transitions reachable through a plain update.  Resolution has its own
#: operation because it needs a winning odd.
_UPDATE_TRANSITIONS = {
    BET_STATUS_OPEN: {BET_STATUS_CLOSED},
    BET_STATUS_CLOSED: set(),
    BET_STATUS_RESOLVED: set(),
}


class BetService(BaseService):
    entity_name = "Bet"

    def __init__(self, repository: BetRepository, events: Optional[EventGatewayClient] = None):
        super().__init__(repository)
        self.repository = repository
        self.events = events

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_all(
        self,
        params: Optional[PageParams] = None,
        status: Optional[Sequence[str]] = None,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Page[Bet]:
        params = params or PageParams()
        for s in status or []:
            self._validate_status(s)
        return self.repository.find_filtered(
            params, statuses=status, category_id=category_id, search=search
        )

    def find_by_status(self, status: str) -> List[Bet]:
        self._validate_status(status)
        return self.repository.find_by_status(status)

    def find_by_category(self, category_id: int) -> List[Bet]:
        self.validate_id(category_id)
        return self.repository.find_by_category(category_id)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, data: BetCreate) -> Bet:
        odds = [o.model_dump() for o in data.odds]
        validate_odds_values(o["value"] for o in odds)
        self._validate_category_exists(data.category_id)

        bet = self.repository.create_with_odds(
            title=data.title,
            description=data.description,
            category_id=data.category_id,
            odds=odds,
        )
        logger.info("Bet %d created with %d odds", bet.id, len(odds))

        if self.events is not None:
            self.events.publish_quietly(BET_MARKET_CREATED, bet_market_created_payload(bet))
        return bet

    def update(self, bet_id: int, data: BetUpdate) -> Bet:
        bet = self.find_by_id(bet_id)

        if bet.status == BET_STATUS_RESOLVED:
            raise ConflictError("Resolved bets cannot be modified")

        changes = data.model_dump(exclude_unset=True, exclude={"odds"})
        if "title" in changes and changes["title"] is None:
            raise BadRequestError("title cannot be null")
        if "category_id" in changes:
            if changes["category_id"] is None:
                raise BadRequestError("categoryId cannot be null")
            self._validate_category_exists(changes["category_id"])
        if "status" in changes:
            target = changes["status"]
            if target is None:
                raise BadRequestError("status cannot be null")
            self._check_transition(bet.status, target)
            if target == bet.status:
                changes.pop("status")

        if data.odds is not None:
            odds = [o.model_dump() for o in data.odds]
            validate_odds_values(o["value"] for o in odds)
            if bet.total_votes > 0:
                raise ConflictError("Cannot change odds of a bet that has votes")
            updated = self.repository.replace_odds(bet, odds, **changes)
        else:
            updated = self.repository.update_fields(bet, **changes)

        logger.info("Bet %d updated: %s", bet_id, sorted(data.model_fields_set))
        return updated

    def delete(self, bet_id: int) -> None:
        bet = self.find_by_id(bet_id)
        if bet.total_votes > 0:
            raise ConflictError("Cannot delete bet that has votes")
        self.repository.delete_with_odds(bet)
        logger.info("Bet %d deleted", bet_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self, bet_id: int) -> Bet:
        bet = self.find_by_id(bet_id)
        if bet.status != BET_STATUS_OPEN:
            raise ConflictError("Only open bets can be closed")

        closed = self.repository.update_fields(bet, status=BET_STATUS_CLOSED)
        logger.info("Bet %d closed", bet_id)
        return closed

    def resolve(self, bet_id: int, winning_odd_id: int) -> Bet:
        self.validate_id(winning_odd_id)
        bet = self.find_by_id(bet_id)

        if bet.status == BET_STATUS_RESOLVED:
            raise ConflictError("Bet is already resolved")

        if not any(odd.id == winning_odd_id for odd in bet.odds):
            raise BadRequestError("Winning odd does not belong to this bet")

        resolved = self.repository.resolve(bet, winning_odd_id)
        logger.info(
            "Bet %d resolved: odd %d won, %d odd(s) lost",
            bet_id, winning_odd_id, len(bet.odds) - 1,
        )
        return resolved

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_status(status: str) -> None:
        if status not in BET_STATUSES:
            raise BadRequestError(
                f"Invalid status '{status}'. Must be one of: {', '.join(BET_STATUSES)}"
            )

    @staticmethod
    def _check_transition(current: str, target: str) -> None:
        if target == current:
            return
        if target == BET_STATUS_RESOLVED:
            raise BadRequestError("Use the resolve operation to resolve a bet")
        if target not in _UPDATE_TRANSITIONS.get(current, set()):
            raise ConflictError(f"Cannot change bet status from '{current}' to '{target}'")

    def _validate_category_exists(self, category_id: int) -> None:
        if not self.repository.category_exists(category_id):
            raise NotFoundError("Category", category_id)

