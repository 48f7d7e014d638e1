"""
Port interfaces (ABCs) for the storage layer.

Ports define the contracts that the dispatcher requires from the outside
world. Infrastructure adapters implement these interfaces. Every operation
is asynchronous and fails with StorageError.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from modelview.domain.entities import Record
from modelview.domain.primary_key import NativeKey


class ModelRepository(ABC):
    """Port for persisting and retrieving the rows of one entity type."""

    @abstractmethod
    async def find_by_key(self, key: NativeKey) -> Optional[Record]:
        """Return the row with the given primary key, or None."""
        raise NotImplementedError

    @abstractmethod
    async def find_all_ordered(
        self, column: str, descending: bool = True
    ) -> list[Record]:
        """Return every row ordered by a column."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_page(
        self, column: str, size: int, page: int, descending: bool = True
    ) -> list[Record]:
        """Return at most ``size`` ordered rows starting at ``size * page``."""
        raise NotImplementedError

    @abstractmethod
    async def insert(self, values: dict[str, Any]) -> Record:
        """Insert a row and return it as stored, including its new key."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, key: NativeKey, values: dict[str, Any]) -> Record:
        """Write ``values`` into the row with the given key and return it."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: NativeKey) -> None:
        """Remove the row with the given key."""
        raise NotImplementedError

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every row. Returns the number of removed rows."""
        raise NotImplementedError
