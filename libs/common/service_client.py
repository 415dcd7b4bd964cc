"""Reusable async HTTP helper for calls to the Vlibe platform API.

Every platform client (database, auth, payments) goes through
``platform_request`` so headers, timeouts and error mapping stay consistent.
The platform wraps payloads as ``{"success": bool, "data": ...}``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

_DEFAULT_ERROR = "API request failed"


class ApiError(Exception):
    """Raised for any non-2xx response from the platform."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[dict] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}


async def platform_request(
    *,
    url: str,
    method: str,
    headers: Optional[dict] = None,
    json: Any = None,
    params: Optional[dict] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    default_error: str = _DEFAULT_ERROR,
) -> Any:
    """Make a JSON request to the platform and return the decoded body.

    Args:
        url: Absolute URL of the endpoint.
        method: HTTP method (GET, POST, PATCH, DELETE, …).
        headers: Extra headers; ``Content-Type: application/json`` is always sent.
        json: Optional JSON body.
        params: Optional query parameters. ``None`` values are dropped.
        timeout: Request timeout in seconds (defaults to settings.HTTP_TIMEOUT).
        transport: Optional httpx transport, used to route calls in tests.
        default_error: Message used when the error body carries none.

    Returns:
        The decoded JSON body.

    Raises:
        ApiError on non-2xx responses.
        httpx.RequestError on connection failures.
    """
    if timeout is None:
        timeout = get_settings().HTTP_TIMEOUT
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})
    if params:
        params = {k: v for k, v in params.items() if v is not None}

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.request(
            method,
            url,
            headers=request_headers,
            json=json,
            params=params or None,
        )

    data = _decode_body(response)

    if not response.is_success:
        message = default_error
        if isinstance(data, dict):
            message = data.get("error") or data.get("message") or default_error
        logger.warning(
            "Platform API error: %s %s -> %s (%s)",
            method,
            url,
            response.status_code,
            message,
        )
        raise ApiError(
            message=message,
            status_code=response.status_code,
            response_data=data if isinstance(data, dict) else {"data": data},
        )

    return data


def unwrap_data(body: Any) -> Any:
    """Return the ``data`` member of a platform envelope."""
    if isinstance(body, dict):
        return body.get("data")
    return None
