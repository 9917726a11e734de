"""Pagination parameters and the ``meta`` block of list responses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = "createdAt"
    sort_order: str = "desc"  # asc | desc

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PageMeta:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, params: PageParams, total: int) -> "PageMeta":
        total_pages = math.ceil(total / params.limit) if params.limit else 0
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_prev=params.page > 1,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    meta: PageMeta = None
