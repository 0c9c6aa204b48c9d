"""
Blog API Backend - Abstract Data-Access Interface
==================================================

What:  Abstract base class defining the contract every store adapter fulfils.
How:   Concrete implementations (SQLAlchemyRepository) inherit from Repository
       and bind one model to one session.
Who:   Called by UserService, BlogPostService and CategoryService.

Contract:
    create(entity)                   → entity with its id assigned
    get(id)                          → entity, or NotFoundError
    find(id)                         → entity or None
    query_all(limit, offset, order)  → list of entities
    count()                          → number of rows
    query_related(entity, relation)  → entities reached through a descriptor
    query(statement)                 → entities selected by an arbitrary statement
    update(entity, values)           → entity with new values
    delete(entity)                   → None

    Store failures never escape as driver exceptions: uniqueness violations
    become ConflictError, everything else DatabaseError.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy import Select

from blogapi.models.relations import Relationship

EntityT = TypeVar("EntityT")


class Repository(ABC, Generic[EntityT]):
    """Abstract persistence port for one entity type."""

    @abstractmethod
    async def create(self, entity: EntityT) -> EntityT:
        """Persist a new entity and return it with the generated id."""
        ...

    @abstractmethod
    async def find(self, entity_id: uuid.UUID) -> Optional[EntityT]:
        """Retrieve an entity by id, or None if absent."""
        ...

    @abstractmethod
    async def get(self, entity_id: uuid.UUID) -> EntityT:
        """
        Retrieve an entity by id.

        Raises:
            NotFoundError: No entity with this id exists.
        """
        ...

    @abstractmethod
    async def query_all(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: Optional[str] = None,
    ) -> List[EntityT]:
        """Retrieve every entity, optionally windowed and ordered by a column name."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def query_related(self, entity: Any, relation: Relationship) -> List[Any]:
        """
        Walk a relationship descriptor from `entity`.

        For a Parent descriptor the result holds exactly one entity when the
        stored reference resolves.
        """
        ...

    @abstractmethod
    async def query(self, statement: Select) -> List[Any]:
        ...

    @abstractmethod
    async def update(self, entity: EntityT, values: Dict[str, Any]) -> EntityT:
        ...

    @abstractmethod
    async def delete(self, entity: Any) -> None:
        ...
