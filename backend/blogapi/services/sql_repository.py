"""
Blog API Backend - SQLAlchemy Repository
=========================================

What:  Concrete Repository backed by an AsyncSession.
How:   One instance per (session, model). Writes are flushed, not committed;
       the request-scoped session from get_db_session commits once the handler
       returns, or rolls everything back on error.

Error translation:
    IntegrityError   → ConflictError   (409)
    SQLAlchemyError  → DatabaseError   (500, details logged only)
    BlogApiError     → passed through unchanged
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import Base
from blogapi.exceptions import BlogApiError, ConflictError, DatabaseError, NotFoundError
from blogapi.models.relations import Relationship
from blogapi.services.repository_base import EntityT, Repository

logger = logging.getLogger(__name__)


class SQLAlchemyRepository(Repository[EntityT]):
    """
    Repository over one mapped model.

    Args:
        session:  Request-scoped AsyncSession
        model:    Mapped class this repository creates and reads
        resource: Name used in NotFoundError / log messages ("user", "blog post")
    """

    def __init__(self, session: AsyncSession, model: Type[Base], resource: str):
        self._session = session
        self._model = model
        self._resource = resource

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except BlogApiError:
            raise
        except IntegrityError as e:
            logger.warning("Integrity violation on %s %s: %s", action, self._resource, e.orig)
            raise ConflictError(
                message=f"The {self._resource} conflicts with an existing record",
                context={"resource": self._resource, "action": action},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error on %s %s: %s", action, self._resource, str(e), exc_info=True)
            raise DatabaseError(
                context={"resource": self._resource, "action": action, "error_type": type(e).__name__},
            ) from e

    async def create(self, entity: EntityT) -> EntityT:
        with self._translate_errors("create"):
            self._session.add(entity)
            await self._session.flush()
        logger.info("Created %s %s", self._resource, entity.id)
        return entity

    async def find(self, entity_id: uuid.UUID) -> Optional[EntityT]:
        with self._translate_errors("get"):
            return await self._session.get(self._model, entity_id)

    async def get(self, entity_id: uuid.UUID) -> EntityT:
        entity = await self.find(entity_id)
        if entity is None:
            raise NotFoundError(resource=self._resource, resource_id=str(entity_id))
        return entity

    async def query_all(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: Optional[str] = None,
    ) -> List[EntityT]:
        stmt = select(self._model).order_by(getattr(self._model, order_by or "created_at"))
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self.query(stmt)

    async def count(self) -> int:
        with self._translate_errors("count"):
            result = await self._session.execute(select(func.count()).select_from(self._model))
            return result.scalar() or 0

    async def query_related(self, entity: Any, relation: Relationship) -> List[Any]:
        return await self.query(relation.statement(entity))

    async def query(self, statement: Select) -> List[Any]:
        with self._translate_errors("query"):
            result = await self._session.execute(statement)
            return list(result.scalars().all())

    async def update(self, entity: EntityT, values: Dict[str, Any]) -> EntityT:
        with self._translate_errors("update"):
            for field, value in values.items():
                setattr(entity, field, value)
            await self._session.flush()
        logger.info("Updated %s %s: %s", self._resource, entity.id, sorted(values))
        return entity

    async def delete(self, entity: Any) -> None:
        with self._translate_errors("delete"):
            await self._session.delete(entity)
            await self._session.flush()
        logger.info("Deleted %s %s", self._resource, entity.id)
