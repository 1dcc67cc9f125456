"""
Gateway configuration: built once at startup and passed explicitly to the client.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from .errors import ConfigError, SigningError
from .keys import KeyMaterial
from .message import PROTOCOL_VERSION

logger = logging.getLogger(__name__)

ENV_GATEWAY = "SILA_GATEWAY"
ENV_APP_HANDLE = "SILA_APP_HANDLE"
ENV_APP_ADDRESS = "SILA_APP_ADDRESS"
ENV_APP_KEY = "SILA_APP_KEY"
ENV_VERSION = "SILA_VERSION"
ENV_TIMEOUT = "SILA_TIMEOUT"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class GatewayConfig:
    """
    Static application credentials and gateway location.

    ``app_private_key`` may be None when the application key lives in a
    remote signer; it is excluded from repr.
    """

    gateway: str
    app_handle: str
    app_address: str
    app_private_key: str | None = field(default=None, repr=False)
    version: str = PROTOCOL_VERSION
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.gateway:
            raise ConfigError("gateway URL is required")
        if not self.app_handle:
            raise ConfigError("app handle is required")
        object.__setattr__(self, "gateway", self.gateway.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewayConfig:
        """
        Read SILA_GATEWAY, SILA_APP_HANDLE, SILA_APP_ADDRESS (required) and
        SILA_APP_KEY, SILA_VERSION, SILA_TIMEOUT (optional).
        """
        env = os.environ if environ is None else environ
        missing = [
            name
            for name in (ENV_GATEWAY, ENV_APP_HANDLE, ENV_APP_ADDRESS)
            if not env.get(name)
        ]
        if missing:
            raise ConfigError(f"missing environment variable(s): {', '.join(missing)}")
        try:
            timeout = float(env.get(ENV_TIMEOUT, DEFAULT_TIMEOUT))
        except ValueError as e:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number") from e
        config = cls(
            gateway=env[ENV_GATEWAY],
            app_handle=env[ENV_APP_HANDLE],
            app_address=env[ENV_APP_ADDRESS],
            app_private_key=env.get(ENV_APP_KEY) or None,
            version=env.get(ENV_VERSION, PROTOCOL_VERSION),
            timeout=timeout,
        )
        logger.debug(
            "gateway config loaded gateway=%s app_handle=%s local_key=%s",
            config.gateway,
            config.app_handle,
            config.app_private_key is not None,
        )
        return config

    def app_key(self) -> KeyMaterial:
        """Application KeyMaterial; raises ConfigError for malformed hex."""
        try:
            return KeyMaterial.from_hex(self.app_address, self.app_private_key)
        except SigningError as e:
            raise ConfigError(f"invalid application credentials: {e}") from e

    def url(self, path: str) -> str:
        return f"{self.gateway}/{path.lstrip('/')}"


__all__: tuple[str, ...] = ("GatewayConfig",)
