"""Category management."""

import logging
from typing import List, Optional

from sarradabet.core.pagination import Page, PageParams
from sarradabet.errors import BadRequestError, ConflictError
from sarradabet.models import Category
from sarradabet.repositories.categories import CategoryRepository
from sarradabet.schemas import CategoryCreate, CategoryUpdate
from sarradabet.services.base import BaseService

logger = logging.getLogger(__name__)


class CategoryService(BaseService):
    entity_name = "Category"

    def __init__(self, repository: CategoryRepository):
        super().__init__(repository)
        self.repository = repository

    def find_all(self, params: Optional[PageParams] = None, search: Optional[str] = None) -> Page[Category]:
        return self.repository.find_filtered(params or PageParams(), search=search)

    def search(self, term: str) -> List[Category]:
        term = (term or "").strip()
        if not term:
            raise BadRequestError("Search term is required")
        return self.repository.search_by_title(term)

    def create(self, data: CategoryCreate) -> Category:
        self._ensure_unique_title(data.title)
        category = self.repository.create(title=data.title)
        logger.info("Category %d created: %s", category.id, category.title)
        return category

    def update(self, category_id: int, data: CategoryUpdate) -> Category:
        category = self.find_by_id(category_id)
        if data.title is None:
            return category
        self._ensure_unique_title(data.title, exclude_id=category_id)
        return self.repository.update(category, title=data.title)

    def delete(self, category_id: int) -> None:
        category = self.find_by_id(category_id)
        bets = self.repository.count_bets(category_id)
        if bets > 0:
            raise ConflictError(f"Cannot delete category that has bets ({bets})")
        self.repository.delete(category)
        logger.info("Category %d deleted", category_id)

    def _ensure_unique_title(self, title: str, exclude_id: Optional[int] = None) -> None:
        if self.repository.find_by_title(title, exclude_id=exclude_id):
            raise ConflictError("Category with this title already exists")
