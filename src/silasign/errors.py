"""
Error taxonomy. Every failure raised by silasign derives from SilaSignError.
"""

from __future__ import annotations

from typing import Any


class SilaSignError(Exception):
    """Base class for all silasign errors."""


class SigningError(SilaSignError):
    """Key material missing or malformed, or a signer back-end failed or declined."""


class EncodingError(SilaSignError):
    """A signature could not be encoded or decoded (bad r, s or recovery id)."""


class SerializationError(SilaSignError):
    """The canonical message could not be produced from the caller's fields."""


class ConfigError(SilaSignError):
    """Gateway configuration is missing or invalid."""


class GatewayError(SilaSignError):
    """
    The HTTP exchange with the gateway failed.

    Attributes:
        error_code: One of TIMEOUT, CONNECTION_FAILED, HTTP_ERROR, INVALID_JSON.
        details: Context for diagnostics (url, status code, body preview).
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


__all__: tuple[str, ...] = (
    "ConfigError",
    "EncodingError",
    "GatewayError",
    "SerializationError",
    "SigningError",
    "SilaSignError",
)
