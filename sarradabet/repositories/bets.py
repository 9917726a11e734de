"""Bet persistence: bets always come back with their odds and category loaded."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Query, joinedload, selectinload

from sarradabet.core.pagination import Page, PageParams
from sarradabet.models import (
    BET_STATUS_RESOLVED,
    ODD_RESULT_LOST,
    ODD_RESULT_WON,
    Bet,
    Category,
    Odd,
)
from sarradabet.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class BetRepository(BaseRepository[Bet]):
    model = Bet
    sortable_fields = {
        "createdAt": "created_at",
        "updatedAt": "updated_at",
        "title": "title",
    }

    def _base_query(self) -> Query:
        return self.db.query(Bet).options(
            selectinload(Bet.odds),
            joinedload(Bet.category),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_filtered(
        self,
        params: PageParams,
        statuses: Optional[Sequence[str]] = None,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Page[Bet]:
        query = self._base_query()
        if statuses:
            query = query.filter(Bet.status.in_(list(statuses)))
        if category_id is not None:
            query = query.filter(Bet.category_id == category_id)
        if search:
            query = query.filter(Bet.title.ilike(contains_pattern(search), escape=LIKE_ESCAPE))
        return self.paginate(query, params)

    def find_by_status(self, status: str) -> List[Bet]:
        return (
            self._base_query()
            .filter(Bet.status == status)
            .order_by(Bet.created_at.desc(), Bet.id.desc())
            .all()
        )

    def find_by_category(self, category_id: int) -> List[Bet]:
        return (
            self._base_query()
            .filter(Bet.category_id == category_id)
            .order_by(Bet.created_at.desc(), Bet.id.desc())
            .all()
        )

    def find_by_external_match_id(self, external_match_id: str) -> Optional[Bet]:
        return (
            self._base_query()
            .filter(Bet.external_match_id == external_match_id)
            .first()
        )

    def category_exists(self, category_id: int) -> bool:
        return (
            self.db.query(Category.id).filter(Category.id == category_id).first()
            is not None
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_with_odds(
        self,
        title: str,
        category_id: int,
        odds: Iterable[Dict[str, Any]],
        description: Optional[str] = None,
        external_match_id: Optional[str] = None,
        market_metadata: Optional[Dict[str, Any]] = None,
    ) -> Bet:
        """Insert the bet and all of its odds in one transaction."""
        with self.transaction():
            bet = Bet(
                title=title,
                description=description,
                category_id=category_id,
                external_match_id=external_match_id,
                market_metadata=market_metadata,
                odds=[Odd(title=o["title"], value=o["value"]) for o in odds],
            )
            self.db.add(bet)
        return self.find_unique(bet.id)

    def update_fields(self, bet: Bet, **values: Any) -> Bet:
        with self.transaction():
            for key, value in values.items():
                setattr(bet, key, value)
        return self.find_unique(bet.id)

    def replace_odds(self, bet: Bet, odds: Iterable[Dict[str, Any]], **values: Any) -> Bet:
        """Swap the bet's whole odd set (and any other fields) atomically."""
        with self.transaction():
            # delete-orphan cascade removes the previous odds
            bet.odds = [Odd(title=o["title"], value=o["value"]) for o in odds]
            for key, value in values.items():
                setattr(bet, key, value)
        return self.find_unique(bet.id)

    def delete_with_odds(self, bet: Bet) -> None:
        with self.transaction():
            self.db.delete(bet)

    def resolve(self, bet: Bet, winning_odd_id: int) -> Bet:
        """
        Settle a bet: winning odd → won, every sibling → lost,
        bet → resolved.  All three statements share one transaction.
        """
        with self.transaction():
            self.db.query(Odd).filter(Odd.id == winning_odd_id).update(
                {Odd.result: ODD_RESULT_WON}, synchronize_session=False
            )
            self.db.query(Odd).filter(
                Odd.bet_id == bet.id,
                Odd.id != winning_odd_id,
            ).update({Odd.result: ODD_RESULT_LOST}, synchronize_session=False)
            bet.status = BET_STATUS_RESOLVED
            bet.resolved_at = datetime.utcnow()
        return self.find_unique(bet.id)
