"""Admin persistence plus the dashboard counters."""

from typing import Dict, Optional

from sqlalchemy import or_

from sarradabet.models import BET_STATUS_OPEN, Admin, Bet, Category, Vote
from sarradabet.repositories.base import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    model = Admin

    def find_by_login(self, identifier: str) -> Optional[Admin]:
        """Match either the username or the email."""
        return (
            self._base_query()
            .filter(or_(Admin.username == identifier, Admin.email == identifier))
            .first()
        )

    def find_conflicting(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[Admin]:
        clauses = []
        if username:
            clauses.append(Admin.username == username)
        if email:
            clauses.append(Admin.email == email)
        if not clauses:
            return None
        query = self._base_query().filter(or_(*clauses))
        if exclude_id is not None:
            query = query.filter(Admin.id != exclude_id)
        return query.first()

    def find_all(self):
        return self._base_query().order_by(Admin.created_at.desc(), Admin.id.desc()).all()

    def stats(self) -> Dict[str, int]:
        return {
            "total_bets": self.db.query(Bet).count(),
            "total_categories": self.db.query(Category).count(),
            "total_votes": self.db.query(Vote).count(),
            "active_bets": self.db.query(Bet).filter(Bet.status == BET_STATUS_OPEN).count(),
        }
