"""Behaviour shared by every entity service."""

from typing import Any

from sarradabet.errors import BadRequestError, NotFoundError
from sarradabet.repositories.base import BaseRepository


class BaseService:
    """Id validation and not-found handling on top of a repository."""

    entity_name = "Entity"

    def __init__(self, repository: BaseRepository):
        self.repository = repository

    @staticmethod
    def validate_id(entity_id: Any) -> None:
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id <= 0:
            raise BadRequestError("Invalid ID provided")

    def find_by_id(self, entity_id: int):
        self.validate_id(entity_id)
        entity = self.repository.find_unique(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity
