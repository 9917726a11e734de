"""
Shared SQLAlchemy plumbing for the repository layer.

Repositories own every query; services never touch the Session directly
except through ``transaction()``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from sarradabet.core.pagination import Page, PageMeta, PageParams

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """``%term%`` with the LIKE wildcards in ``term`` matched literally."""
    for ch in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(ch, LIKE_ESCAPE + ch)
    return f"%{term}%"


class BaseRepository(Generic[ModelT]):
    """CRUD helpers for a single mapped class."""

    model: Type[ModelT]

    #: API sort key → mapped column name
    sortable_fields: Dict[str, str] = {"createdAt": "created_at"}

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def _base_query(self) -> Query:
        return self.db.query(self.model)

    def _order_by(self, query: Query, params: PageParams) -> Query:
        column_name = self.sortable_fields.get(params.sort_by, "created_at")
        column = getattr(self.model, column_name)
        ordered = column.asc() if params.sort_order == "asc" else column.desc()
        # id as tie-breaker keeps pages stable
        id_order = self.model.id.asc() if params.sort_order == "asc" else self.model.id.desc()
        return query.order_by(ordered, id_order)

    def paginate(self, query: Query, params: PageParams) -> Page[ModelT]:
        total = query.order_by(None).count()
        items = (
            self._order_by(query, params)
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return Page(items=items, meta=PageMeta.build(params, total))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def find_unique(self, entity_id: int) -> Optional[ModelT]:
        return self._base_query().filter(self.model.id == entity_id).first()

    def find_many(self, **filters: Any) -> List[ModelT]:
        return self._base_query().filter_by(**filters).order_by(self.model.id.desc()).all()

    def find_many_with_pagination(self, params: PageParams) -> Page[ModelT]:
        return self.paginate(self._base_query(), params)

    def count(self, **filters: Any) -> int:
        return self.db.query(self.model).filter_by(**filters).count()

    def create(self, **values: Any) -> ModelT:
        with self.transaction():
            entity = self.model(**values)
            self.db.add(entity)
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelT, **values: Any) -> ModelT:
        with self.transaction():
            for key, value in values.items():
                setattr(entity, key, value)
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        with self.transaction():
            self.db.delete(entity)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
