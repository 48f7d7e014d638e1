"""
Use case: Generic CRUD dispatch for one entity type.

Input: wire identifiers, decoded JSON bodies and raw query parameters.
Output: Records (or nothing, for deletes).
Side effects: Reads and writes through the ModelRepository port.
Failure cases: ValidationError, KeyConversionError, PrimaryKeyNotFoundError,
StorageError.
"""

import logging
from typing import Any, Mapping

from modelview.domain.descriptor import ModelDescriptor
from modelview.domain.entities import MutableRecord, Record
from modelview.domain.errors import PrimaryKeyNotFoundError
from modelview.domain.merge import merge_partial_update
from modelview.domain.pagination import PAGE_SIZE, resolve_page
from modelview.domain.ports import ModelRepository
from modelview.domain.primary_key import NativeKey

logger = logging.getLogger(__name__)


class CrudDispatcher:
    """Orchestrates the CRUD operations of one entity type.

    Holds no cross-request state. Every operation is a single linear
    sequence: decode, optional existence lookup, mutate or query.
    """

    def __init__(
        self,
        descriptor: ModelDescriptor,
        repository: ModelRepository,
        default_page_size: int = PAGE_SIZE.default,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            descriptor: Capability descriptor of the entity type.
            repository: Storage port for the entity type.
            default_page_size: Page size used when ``page_size`` is absent.
        """
        self._descriptor = descriptor
        self._repository = repository
        self._default_page_size = default_page_size

    @property
    def name(self) -> str:
        return self._descriptor.name

    async def create(self, body: Any) -> Record:
        """Insert a new row. The store always assigns the primary key.

        Args:
            body: Record-shaped JSON object. Any identity it carries is ignored.

        Returns:
            The stored record, including its assigned key.
        """
        mutable = self._full_record(body)
        logger.debug("[%s] http create: before not set pk %r", self.name, mutable)
        mutable.unset(self._descriptor.primary_key.name)
        logger.debug("[%s] http create: active model is %r", self.name, mutable)
        record = await self._repository.insert(mutable.changes())
        logger.debug("[%s] http create: create model %r", self.name, record)
        return record

    async def retrieve(self, identifier: int) -> Record:
        """Return the row with the given wire identifier."""
        logger.debug("[%s] http retrieve: pk: %d", self.name, identifier)
        _, record = await self._check_instance_exists(identifier)
        return record

    async def list_records(self, query: Mapping[str, Any]) -> list[Record]:
        """Return rows ordered by the default sort column, descending.

        Args:
            query: Raw query parameters (``page_size``, ``page_num``).

        Returns:
            One page of rows, or every row when the page size is 0.
        """
        page = resolve_page(query, default_size=self._default_page_size)
        order_by = self._descriptor.order_by
        if page.unpaginated:
            logger.debug("[%s] http list: fetch all", self.name)
            records = await self._repository.find_all_ordered(order_by, descending=True)
        else:
            records = await self._repository.fetch_page(
                order_by, page.size, page.number, descending=True
            )
        logger.debug("[%s] http list: fetch results len %d", self.name, len(records))
        return records

    async def full_update(self, identifier: int, body: Any) -> Record:
        """Replace every column of an existing row.

        Columns omitted from the body take their type's zero value. The
        primary key always comes from the path identifier.
        """
        logger.debug("[%s] http update check: %d", self.name, identifier)
        key, _ = await self._check_instance_exists(identifier)
        mutable = self._full_record(body)
        mutable.set(self._descriptor.primary_key.name, key)
        logger.debug(
            "[%s] http update: active pk: %d active model: %r",
            self.name,
            identifier,
            mutable,
        )
        record = await self._repository.update(key, mutable.changes())
        logger.debug("[%s] http update: result %r", self.name, record)
        return record

    async def partial_update(self, identifier: int, patch: Any) -> Record:
        """Change only the columns named in ``patch``."""
        logger.debug("[%s] http patch check: %d", self.name, identifier)
        key, current = await self._check_instance_exists(identifier)
        mutable = merge_partial_update(self._descriptor, current, patch)
        changes = mutable.changes()
        if not changes:
            logger.debug("[%s] http patch: nothing to change for pk %d", self.name, identifier)
            return current
        record = await self._repository.update(key, changes)
        logger.debug("[%s] http patch: result %r", self.name, record)
        return record

    async def delete(self, identifier: int) -> None:
        """Remove an existing row."""
        logger.debug("[%s] http delete: pk: %d", self.name, identifier)
        key, _ = await self._check_instance_exists(identifier)
        await self._repository.delete(key)
        logger.debug("[%s] http delete: success pk: %d", self.name, identifier)

    async def delete_all(self) -> int:
        """Remove every row, whether or not any exist."""
        logger.debug("[%s] http delete all", self.name)
        removed = await self._repository.delete_all()
        logger.info("[%s] http delete all success: %d rows removed", self.name, removed)
        return removed

    def _full_record(self, body: Any) -> MutableRecord:
        values = self._descriptor.decode_body(body)
        mutable = MutableRecord(self._descriptor.column_names)
        for name in self._descriptor.column_names:
            mutable.set(name, values[name])
        return mutable

    async def _check_instance_exists(self, identifier: int) -> tuple[NativeKey, Record]:
        key = self._descriptor.codec.decode(identifier)
        record = await self._repository.find_by_key(key)
        if record is None:
            raise PrimaryKeyNotFoundError(identifier)
        return key, record
