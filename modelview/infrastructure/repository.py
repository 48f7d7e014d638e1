"""
Adapter: SQLAlchemy model repository.

Implements the ModelRepository port for any mapped class using SQLAlchemy
asyncio sessions. Each method opens its own session, so no connection is
held across more than one logical storage call.
"""

import logging
from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from modelview.domain.descriptor import ModelDescriptor
from modelview.domain.entities import Record
from modelview.domain.errors import StorageError
from modelview.domain.ports import ModelRepository
from modelview.domain.primary_key import NativeKey

logger = logging.getLogger(__name__)

# LIMIT and OFFSET are bound as signed 64-bit integers by every driver.
SQL_INT_MAX = 2**63 - 1


class SqlAlchemyModelRepository(ModelRepository):
    """Persists the rows of one mapped class through an async session factory.

    Every SQLAlchemy failure, including a timeout while waiting for a pooled
    connection, is re-raised as StorageError.
    """

    def __init__(
        self,
        descriptor: ModelDescriptor,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._descriptor = descriptor
        self._model = descriptor.model
        self._session_factory = session_factory

    def _attribute(self, name: str):
        return getattr(self._model, name)

    def _order(self, column: str, descending: bool):
        attribute = self._attribute(column)
        return attribute.desc() if descending else attribute.asc()

    async def find_by_key(self, key: NativeKey) -> Optional[Record]:
        try:
            async with self._session_factory() as session:
                instance = await session.get(self._model, key)
                return None if instance is None else self._descriptor.to_record(instance)
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

    async def find_all_ordered(
        self, column: str, descending: bool = True
    ) -> list[Record]:
        statement = select(self._model).order_by(self._order(column, descending))
        return await self._fetch(statement)

    async def fetch_page(
        self, column: str, size: int, page: int, descending: bool = True
    ) -> list[Record]:
        statement = (
            select(self._model)
            .order_by(self._order(column, descending))
            .limit(min(size, SQL_INT_MAX))
            .offset(min(size * page, SQL_INT_MAX))
        )
        return await self._fetch(statement)

    async def insert(self, values: dict[str, Any]) -> Record:
        try:
            async with self._session_factory() as session:
                instance = self._model(**values)
                session.add(instance)
                await session.commit()
                await session.refresh(instance)
                return self._descriptor.to_record(instance)
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

    async def update(self, key: NativeKey, values: dict[str, Any]) -> Record:
        key_attribute = self._attribute(self._descriptor.primary_key.name)
        assignments = {self._attribute(name): value for name, value in values.items()}
        try:
            async with self._session_factory() as session:
                if assignments:
                    await session.execute(
                        update(self._model)
                        .where(key_attribute == key)
                        .values(assignments)
                        .execution_options(synchronize_session=False)
                    )
                    await session.commit()
                instance = await session.get(self._model, key, populate_existing=True)
                if instance is None:
                    raise StorageError(LookupError(f"row {key!r} vanished during update"))
                return self._descriptor.to_record(instance)
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

    async def delete(self, key: NativeKey) -> None:
        key_attribute = self._attribute(self._descriptor.primary_key.name)
        try:
            async with self._session_factory() as session:
                await session.execute(delete(self._model).where(key_attribute == key))
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

    async def delete_all(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(self._model))
                await session.commit()
                return result.rowcount
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

    async def _fetch(self, statement) -> list[Record]:
        try:
            async with self._session_factory() as session:
                result = await session.scalars(statement)
                records = [self._descriptor.to_record(instance) for instance in result.all()]
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

        logger.debug("Fetched %d %s rows.", len(records), self._descriptor.name)
        return records
