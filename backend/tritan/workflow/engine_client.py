"""
Engine Client — async HTTP access to the remote validation/execution engine.

One short-lived ``httpx.AsyncClient`` per request; the transport's
own timeout is the only deadline. Every failure mode (transport
error, non-2xx status, non-JSON body) surfaces as ``EngineError``
so callers have a single thing to catch.
"""

from __future__ import annotations

from logging import getLogger
from typing import Any, Dict, Optional

import httpx

logger = getLogger(__name__)

VALIDATE_PATH = "/api/workflows/validate"
EXECUTE_PATH = "/api/execute/"
HEALTH_PATH = "/health"


class EngineError(Exception):
    """The engine could not be reached or refused the request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EngineClient:
    """Thin request/response wrapper over the engine's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    # ── Public API ──

    async def validate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", VALIDATE_PATH, "Validation", payload)

    async def execute(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", EXECUTE_PATH, "Execution", payload)

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", HEALTH_PATH, "Health check")

    # ── Internals ──

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                response = await client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            detail = str(e) or type(e).__name__
            logger.warning(f"{action} request to {url} failed: {detail}")
            raise EngineError(f"{action} failed: {detail}") from e

        if response.is_error:
            reason = response.reason_phrase or f"HTTP {response.status_code}"
            logger.warning(f"{action} request to {url} returned {response.status_code}")
            raise EngineError(f"{action} failed: {reason}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise EngineError(
                f"{action} failed: response was not JSON",
                status_code=response.status_code,
            ) from e
        if not isinstance(body, dict):
            raise EngineError(
                f"{action} failed: expected a JSON object",
                status_code=response.status_code,
            )
        return body
