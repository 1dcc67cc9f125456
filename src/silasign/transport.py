"""
HTTP transport to the gateway.

Sends the canonical bytes verbatim (``content=``, never ``json=``) so the body
on the wire is byte-for-byte the body that was hashed and signed.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .auth import AuthenticatedRequest
from .config import GatewayConfig
from .errors import GatewayError

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "SUCCESS"
STATUS_FAILURE = "FAILURE"


class GatewayResponse(BaseModel):
    """
    Decoded gateway reply. Endpoint-specific keys are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    success: bool | None = None
    status: str | None = None
    message: str | None = None
    reference: str | None = None

    @property
    def ok(self) -> bool:
        return self.success is not False and self.status != STATUS_FAILURE


class GatewayTransport:
    """
    Async HTTP adapter for one gateway.

    Args:
        config: Gateway location and timeout.
        client: Pre-built httpx.AsyncClient (not closed by this transport).
        headers: Extra headers sent with every request.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        client: httpx.AsyncClient | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._headers = dict(headers or {})

    async def __aenter__(self) -> GatewayTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, path: str, request: AuthenticatedRequest) -> GatewayResponse:
        """POST a signed request to ``{gateway}/{path}``."""
        return await self._post(path, request.body, request.headers())

    async def post_unsigned(self, path: str, payload: Mapping[str, Any]) -> GatewayResponse:
        """POST an unauthenticated JSON payload (e.g. balance queries)."""
        body = json.dumps(dict(payload), separators=(",", ":")).encode("utf-8")
        return await self._post(path, body, {})

    async def _post(self, path: str, body: bytes, auth_headers: Mapping[str, str]) -> GatewayResponse:
        url = self._config.url(path)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **self._headers,
            **auth_headers,
        }
        try:
            response = await self._client.post(url, content=body, headers=headers)
        except httpx.TimeoutException as e:
            raise GatewayError(
                f"request to {path} timed out after {self._config.timeout}s",
                error_code="TIMEOUT",
                details={"url": url, "timeout": self._config.timeout},
            ) from e
        except httpx.ConnectError as e:
            raise GatewayError(
                f"failed to connect to {url}",
                error_code="CONNECTION_FAILED",
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError(
                f"HTTP error: {e}",
                error_code="HTTP_ERROR",
                details={"url": url, "error": str(e)},
            ) from e
        return self._decode(path, url, response)

    def _decode(self, path: str, url: str, response: httpx.Response) -> GatewayResponse:
        details = {
            "url": url,
            "status_code": response.status_code,
            "body_preview": response.text[:200],
        }
        # Failed HTTP statuses without a JSON body are transport errors;
        # with a JSON body they are gateway answers like any other.
        error_code = "HTTP_ERROR" if response.status_code >= 400 else "INVALID_JSON"
        try:
            data = response.json()
        except ValueError as e:
            logger.error("%s: undecodable response: %s", path, response.text)
            raise GatewayError(
                f"{path}: response was not valid JSON (HTTP {response.status_code})",
                error_code=error_code,
                details=details,
            ) from e
        if not isinstance(data, dict):
            logger.error("%s: unexpected response: %s", path, response.text)
            raise GatewayError(
                f"{path}: response JSON was not an object",
                error_code=error_code,
                details=details,
            )
        try:
            result = GatewayResponse.model_validate(data)
        except ValidationError as e:
            logger.error("%s: malformed response: %s", path, response.text)
            raise GatewayError(
                f"{path}: malformed response: {e}",
                error_code="INVALID_JSON",
                details=details,
            ) from e
        if not result.ok:
            logger.error("%s failed: %s", path, response.text)
        return result


__all__: tuple[str, ...] = (
    "STATUS_FAILURE",
    "STATUS_SUCCESS",
    "GatewayResponse",
    "GatewayTransport",
)
