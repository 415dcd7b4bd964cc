"""
Platform database client.

Provides async access to a project's managed database:
- Table management (create, inspect, list, drop)
- Collection CRUD and counting
- Key-value storage
"""

import json
from typing import Any, Optional
from urllib.parse import quote

import httpx
from libs.common.config import get_settings
from libs.common.service_client import ApiError, platform_request, unwrap_data
from services.database_service.base import OrderDirection, RecordStore
from services.database_service.schemas import TableInfo, TableSchema


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class DatabaseClient(RecordStore):
    """Async Record Store backed by the platform REST API."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        database_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.project_id = project_id or settings.VLIBE_PROJECT_ID
        if not self.project_id:
            raise ValueError("DatabaseClient: project_id is required")
        self.database_token = database_token or settings.VLIBE_DB_TOKEN
        if not self.database_token:
            raise ValueError("DatabaseClient: database_token is required")
        self.base_url = (base_url or settings.VLIBE_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport
        self._headers = {"Authorization": f"Bearer {self.database_token}"}

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Any = None,
    ) -> Any:
        """Make a request to the project database API and unwrap ``data``."""
        body = await platform_request(
            url=f"{self.base_url}/api/database/{self.project_id}{endpoint}",
            method=method,
            headers=self._headers,
            params=params,
            json=json_data,
            timeout=self.timeout,
            transport=self._transport,
        )
        return unwrap_data(body)

    # =========================================================================
    # Table Methods
    # =========================================================================

    async def create_table(self, name: str, schema: TableSchema) -> TableInfo:
        data = await self._request(
            "POST",
            "/tables",
            json_data={"name": name, "schema": schema.to_record()},
        )
        return TableInfo.model_validate(data)

    async def get_table(self, name: str) -> Optional[TableInfo]:
        try:
            data = await self._request("GET", f"/tables/{_segment(name)}")
        except ApiError as exc:
            if exc.is_not_found:
                return None
            raise
        return TableInfo.model_validate(data)

    async def list_tables(self) -> list[TableInfo]:
        data = await self._request("GET", "/tables")
        return [TableInfo.model_validate(item) for item in data or []]

    async def delete_table(self, name: str) -> bool:
        await self._request("DELETE", f"/tables/{_segment(name)}")
        return True

    # =========================================================================
    # Collection Methods
    # =========================================================================

    async def insert(self, collection: str, record: dict) -> dict:
        return await self._request(
            "POST", f"/collections/{_segment(collection)}", json_data=record
        )

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
        params = {
            "limit": limit or None,
            "offset": offset or None,
            "orderBy": order_by,
            "orderDirection": order_direction if order_by else None,
            "where": json.dumps(where) if where else None,
        }
        data = await self._request(
            "GET", f"/collections/{_segment(collection)}", params=params
        )
        return list(data or [])

    async def get(self, collection: str, record_id: str) -> Optional[dict]:
        try:
            return await self._request(
                "GET", f"/collections/{_segment(collection)}/{_segment(record_id)}"
            )
        except ApiError as exc:
            if exc.is_not_found:
                return None
            raise

    async def update(self, collection: str, record_id: str, changes: dict) -> dict:
        return await self._request(
            "PATCH",
            f"/collections/{_segment(collection)}/{_segment(record_id)}",
            json_data=changes,
        )

    async def delete(self, collection: str, record_id: str) -> bool:
        await self._request(
            "DELETE", f"/collections/{_segment(collection)}/{_segment(record_id)}"
        )
        return True

    async def count(self, collection: str, where: Optional[dict] = None) -> int:
        params = {"where": json.dumps(where) if where else None}
        data = await self._request(
            "GET", f"/collections/{_segment(collection)}/count", params=params
        )
        return int((data or {}).get("count", 0))

    # =========================================================================
    # Key-Value Methods
    # =========================================================================

    async def set_kv(self, key: str, value: Any) -> None:
        await self._request("POST", "/kv", json_data={"key": key, "value": value})

    async def get_kv(self, key: str) -> Any:
        try:
            data = await self._request("GET", f"/kv/{_segment(key)}")
        except ApiError as exc:
            if exc.is_not_found:
                return None
            raise
        return (data or {}).get("value")

    async def delete_kv(self, key: str) -> bool:
        await self._request("DELETE", f"/kv/{_segment(key)}")
        return True
