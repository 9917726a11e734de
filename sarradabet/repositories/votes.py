"""Vote persistence.  Votes are insert-only."""

from typing import Optional

from sqlalchemy.orm import Query, joinedload

from sarradabet.core.pagination import Page, PageParams
from sarradabet.models import Odd, Vote
from sarradabet.repositories.base import BaseRepository


class VoteRepository(BaseRepository[Vote]):
    model = Vote

    def _base_query(self) -> Query:
        return self.db.query(Vote).options(joinedload(Vote.odd).joinedload(Odd.bet))

    def find_filtered(
        self,
        params: PageParams,
        odd_id: Optional[int] = None,
        bet_id: Optional[int] = None,
    ) -> Page[Vote]:
        query = self._base_query()
        if odd_id is not None:
            query = query.filter(Vote.odd_id == odd_id)
        if bet_id is not None:
            query = query.join(Odd, Vote.odd_id == Odd.id).filter(Odd.bet_id == bet_id)
        return self.paginate(query, params)

    def find_odd(self, odd_id: int) -> Optional[Odd]:
        return (
            self.db.query(Odd)
            .options(joinedload(Odd.bet))
            .filter(Odd.id == odd_id)
            .first()
        )

    def create_for_odd(self, odd_id: int) -> Vote:
        with self.transaction():
            vote = Vote(odd_id=odd_id)
            self.db.add(vote)
        return self.find_unique(vote.id)
