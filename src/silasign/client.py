"""
Gateway client: build -> authenticate -> send, for one application.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from .auth import authenticate_request
from .config import GatewayConfig
from .endpoints import GET_SILA_BALANCE_PATH, Endpoint
from .errors import SerializationError, SigningError
from .keys import KeyMaterial
from .message import CanonicalMessage, build_message
from .signing import LocalSigner, Signer
from .transport import GatewayResponse, GatewayTransport

logger = logging.getLogger(__name__)


class SilaClient:
    """
    Authenticated access to the gateway for one application.

    Args:
        config: Gateway location and application credentials.
        signer: Signing back-end shared by the application and user keys;
            defaults to LocalSigner().
        transport: HTTP transport; defaults to a GatewayTransport for ``config``.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        signer: Signer | None = None,
        transport: GatewayTransport | None = None,
    ) -> None:
        self._config = config
        self._app_key = config.app_key()
        self._signer = signer if signer is not None else LocalSigner()
        self._transport = transport if transport is not None else GatewayTransport(config)

    async def __aenter__(self) -> SilaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def build(
        self,
        endpoint: Endpoint,
        fields: Mapping[str, Any] | BaseModel | None = None,
        *,
        user_handle: str | None = None,
        reference: str | None = None,
    ) -> CanonicalMessage:
        """Canonical message for ``endpoint`` with validated business fields."""
        return build_message(
            user_handle,
            self._config.app_handle,
            _validate_fields(endpoint, fields),
            message=endpoint.message,
            version=self._config.version,
            layout=endpoint.layout,
            reference=reference,
        )

    async def call(
        self,
        endpoint: Endpoint,
        fields: Mapping[str, Any] | BaseModel | None = None,
        *,
        user_handle: str | None = None,
        user_key: KeyMaterial | None = None,
        reference: str | None = None,
    ) -> GatewayResponse:
        """
        Build, sign and send one call.

        Raises:
            SigningError: the endpoint needs a user signature and ``user_key``
                is None, or signing failed. Nothing is sent.
            SerializationError: ``fields`` do not fit the endpoint, or a
                user-signed endpoint was called without ``user_handle``.
            GatewayError: the HTTP exchange failed.
        """
        if endpoint.user_signed:
            if user_key is None:
                raise SigningError(f"{endpoint.path} requires a user signature")
            if not user_handle:
                raise SerializationError(f"{endpoint.path} requires a user handle")
        message = self.build(
            endpoint, fields, user_handle=user_handle, reference=reference
        )
        request = await authenticate_request(
            message, self._app_key, user_key, self._signer
        )
        logger.debug("sending %s reference=%s", endpoint.path, message.reference)
        return await self._transport.send(endpoint.path, request)

    async def get_sila_balance(self, address: str) -> GatewayResponse:
        """Unauthenticated balance query for a blockchain address."""
        return await self._transport.post_unsigned(
            GET_SILA_BALANCE_PATH, {"blockchain_address": address}
        )


def _validate_fields(
    endpoint: Endpoint, fields: Mapping[str, Any] | BaseModel | None
) -> BaseModel | None:
    model = endpoint.fields
    if model is None:
        if fields:
            raise SerializationError(f"{endpoint.path} takes no business fields")
        return None
    if isinstance(fields, model):
        return fields
    if isinstance(fields, BaseModel):
        raise SerializationError(
            f"{endpoint.path} expects {model.__name__}, got {type(fields).__name__}"
        )
    try:
        return model.model_validate(dict(fields or {}))
    except ValidationError as e:
        raise SerializationError(f"invalid fields for {endpoint.path}: {e}") from e


__all__: tuple[str, ...] = ("SilaClient",)
