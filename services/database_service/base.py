"""Record Store interface.

Every storage backend (the remote platform database, the in-process store used
in tests) implements this contract. The e-commerce core only ever talks to a
``RecordStore``.
"""

import abc
from typing import Any, Literal, Optional


OrderDirection = Literal["asc", "desc"]


def matches(record: dict, where: Optional[dict]) -> bool:
    """Equality match of every ``where`` key against a record."""
    if not where:
        return True
    return all(record.get(key) == value for key, value in where.items())


class RecordStore(abc.ABC):
    """Key-addressable collections plus a key-value store."""

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def insert(self, collection: str, record: dict) -> dict:
        """Insert a record and return it as stored."""

    @abc.abstractmethod
    async def query(
        self,
        collection: str,
        *,
        where: Optional[dict] = None,
        order_by: Optional[str] = None,
        order_direction: OrderDirection = "asc",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[dict]:
        """Return records matching ``where`` (equality on every key)."""

    @abc.abstractmethod
    async def get(self, collection: str, record_id: str) -> Optional[dict]:
        """Return a record, or None when absent."""

    @abc.abstractmethod
    async def update(self, collection: str, record_id: str, changes: dict) -> dict:
        """Merge ``changes`` into a record and return the result."""

    @abc.abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record."""

    @abc.abstractmethod
    async def count(self, collection: str, where: Optional[dict] = None) -> int:
        """Count records matching ``where``."""

    async def update_if(
        self,
        collection: str,
        record_id: str,
        expected: dict,
        changes: dict,
    ) -> Optional[dict]:
        """Apply ``changes`` only while every ``expected`` key still matches.

        Returns the updated record, or None when the record is absent or has
        moved on. This default is a read-compare-write and is NOT atomic;
        backends that can do better override it.
        """
        current = await self.get(collection, record_id)
        if current is None or not matches(current, expected):
            return None
        return await self.update(collection, record_id, changes)

    # ------------------------------------------------------------------
    # Key-value store
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def set_kv(self, key: str, value: Any) -> None:
        """Set a key-value pair."""

    @abc.abstractmethod
    async def get_kv(self, key: str) -> Any:
        """Return the value for ``key``, or None when unset."""

    @abc.abstractmethod
    async def delete_kv(self, key: str) -> bool:
        """Delete a key-value pair."""
