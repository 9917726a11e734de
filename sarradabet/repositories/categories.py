"""Category persistence."""

from typing import List, Optional

from sqlalchemy import func

from sarradabet.core.pagination import Page, PageParams
from sarradabet.models import Bet, Category
from sarradabet.repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class CategoryRepository(BaseRepository[Category]):
    model = Category
    sortable_fields = {
        "createdAt": "created_at",
        "updatedAt": "updated_at",
        "title": "title",
    }

    def find_filtered(self, params: PageParams, search: Optional[str] = None) -> Page[Category]:
        query = self._base_query()
        if search:
            query = query.filter(Category.title.ilike(contains_pattern(search), escape=LIKE_ESCAPE))
        return self.paginate(query, params)

    def search_by_title(self, term: str) -> List[Category]:
        return (
            self._base_query()
            .filter(Category.title.ilike(contains_pattern(term), escape=LIKE_ESCAPE))
            .order_by(Category.title.asc())
            .all()
        )

    def find_by_title(self, title: str, exclude_id: Optional[int] = None) -> Optional[Category]:
        query = self._base_query().filter(func.lower(Category.title) == title.lower())
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def get_or_create(self, title: str) -> Category:
        category = self._base_query().filter(Category.title == title).first()
        if category:
            return category
        return self.create(title=title)

    def count_bets(self, category_id: int) -> int:
        return self.db.query(Bet).filter(Bet.category_id == category_id).count()
