"""In-process Record Store.

Mirrors the platform database semantics closely enough to run the e-commerce
core locally and in tests. All mutations are serialised by a single
``asyncio.Lock`` so ``update_if`` is a true compare-and-update.
"""

import asyncio
import copy
import uuid
from collections import defaultdict
from typing import Any, Optional

from libs.common.service_client import ApiError
from services.database_service.base import OrderDirection, RecordStore, matches


def _sort_key(field: str):
    def key(record: dict):
        value = record.get(field)
        # Missing values sort last in ascending order
        return (value is None, value if value is not None else 0)

    return key


class InMemoryRecordStore(RecordStore):
    """Dict-backed store: ``{collection: {id: record}}`` plus a KV dict."""

    def __init__(self):
        self._collections: dict[str, dict[str, dict]] = defaultdict(dict)
        self._kv: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def insert(self, collection: str, record: dict) -> dict:
        async with self._lock:
            stored = copy.deepcopy(record)
            stored.setdefault("id", str(uuid.uuid4()))
            rows = self._collections[collection]
            if stored["id"] in rows:
                raise ApiError(
                    f"Duplicate id in {collection}: {stored['id']}", status_code=409
                )
            rows[stored["id"]] = stored
            return copy.deepcopy(stored)

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
        async with self._lock:
            rows = [
                record
                for record in self._collections[collection].values()
                if matches(record, where)
            ]
            if order_by:
                rows.sort(key=_sort_key(order_by), reverse=order_direction == "desc")
            start = offset or 0
            end = start + limit if limit else None
            return copy.deepcopy(rows[start:end])

    async def get(self, collection: str, record_id: str) -> Optional[dict]:
        async with self._lock:
            record = self._collections[collection].get(record_id)
            return copy.deepcopy(record) if record is not None else None

    async def update(self, collection: str, record_id: str, changes: dict) -> dict:
        async with self._lock:
            return self._apply(collection, record_id, changes)

    async def delete(self, collection: str, record_id: str) -> bool:
        async with self._lock:
            return self._collections[collection].pop(record_id, None) is not None

    async def count(self, collection: str, where: Optional[dict] = None) -> int:
        async with self._lock:
            return sum(
                1
                for record in self._collections[collection].values()
                if matches(record, where)
            )

    async def update_if(
        self,
        collection: str,
        record_id: str,
        expected: dict,
        changes: dict,
    ) -> Optional[dict]:
        async with self._lock:
            current = self._collections[collection].get(record_id)
            if current is None or not matches(current, expected):
                return None
            return self._apply(collection, record_id, changes)

    def _apply(self, collection: str, record_id: str, changes: dict) -> dict:
        rows = self._collections[collection]
        if record_id not in rows:
            raise ApiError(f"Record not found: {collection}/{record_id}", status_code=404)
        merged = {**rows[record_id], **copy.deepcopy(changes), "id": record_id}
        rows[record_id] = merged
        return copy.deepcopy(merged)

    # ------------------------------------------------------------------
    # Key-value store
    # ------------------------------------------------------------------

    async def set_kv(self, key: str, value: Any) -> None:
        async with self._lock:
            self._kv[key] = copy.deepcopy(value)

    async def get_kv(self, key: str) -> Any:
        async with self._lock:
            return copy.deepcopy(self._kv.get(key))

    async def delete_kv(self, key: str) -> bool:
        async with self._lock:
            return self._kv.pop(key, None) is not None
