"""
Header/message builder.

A request body is serialized exactly once, here. The resulting
CanonicalMessage bytes are what gets hashed, signed and transmitted; there is
no way to change a field afterwards short of building a new message (which
gets a new reference and timestamp, and therefore a new digest).
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

from .errors import SerializationError
from .hashes import keccak256

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "0.2"
CRYPTO_ETH = "ETH"

_RESERVED_KEYS = frozenset({"header", "message"})


class MessageLayout(str, Enum):
    """What the canonical bytes contain."""

    FULL = "full"  # header, message label and business fields
    HEADER_ONLY = "header_only"  # header and message label only


@dataclass(frozen=True)
class Header:
    """Per-call envelope. Field order is the serialized order."""

    reference: str
    created: int
    user_handle: str | None
    auth_handle: str
    version: str = PROTOCOL_VERSION
    crypto: str = CRYPTO_ETH

    @classmethod
    def new(
        cls,
        auth_handle: str,
        user_handle: str | None = None,
        *,
        version: str = PROTOCOL_VERSION,
        crypto: str = CRYPTO_ETH,
        reference: str | None = None,
    ) -> Header:
        """Fresh header: uuid4 reference (unless given) and the current epoch second."""
        return cls(
            reference=reference or str(uuid.uuid4()),
            created=int(time.time()),
            user_handle=user_handle,
            auth_handle=auth_handle,
            version=version,
            crypto=crypto,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CanonicalMessage:
    """
    Serialized request body: the single source for hashing and transport.

    Build with build_message(); never construct from hand-edited JSON.
    """

    body: bytes
    reference: str

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def digest(self) -> bytes:
        """Keccak-256 of the body bytes."""
        return keccak256(self.body)

    def __len__(self) -> int:
        return len(self.body)


def _business_fields(fields: Mapping[str, Any] | BaseModel | None) -> dict[str, Any]:
    if fields is None:
        return {}
    if isinstance(fields, BaseModel):
        return fields.model_dump(mode="json", exclude_none=True)
    if isinstance(fields, Mapping):
        return dict(fields)
    raise SerializationError(
        f"fields must be a mapping or pydantic model, got {type(fields).__name__}"
    )


def _dumps(payload: dict[str, Any]) -> bytes:
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"message is not JSON-serializable: {e}") from e
    return text.encode("utf-8")


def build_message(
    user_handle: str | None,
    app_handle: str,
    fields: Mapping[str, Any] | BaseModel | None = None,
    *,
    message: str | None = None,
    version: str = PROTOCOL_VERSION,
    crypto: str = CRYPTO_ETH,
    layout: MessageLayout = MessageLayout.FULL,
    reference: str | None = None,
) -> CanonicalMessage:
    """
    Build and serialize a request body.

    Args:
        user_handle: End-user handle, or None for application-only calls.
        app_handle: The application's own handle (header ``auth_handle``).
        fields: Business fields (mapping or pydantic model), emitted after
            ``header`` and ``message`` in their own order.
        message: Message label some endpoints require (e.g. "transfer_msg").
        version: Protocol version for the header.
        crypto: Signing curve/chain symbol for the header.
        layout: FULL sends the business fields; HEADER_ONLY sends only the
            header and message label.
        reference: Caller-supplied reference; a uuid4 is generated if None.

    Returns:
        CanonicalMessage holding the UTF-8 JSON bytes.

    Raises:
        SerializationError: empty app handle, reserved or non-JSON fields, or
            business fields passed with HEADER_ONLY.
    """
    if not app_handle:
        raise SerializationError("app_handle is required")
    body_fields = _business_fields(fields)
    clash = _RESERVED_KEYS.intersection(body_fields)
    if clash:
        raise SerializationError(f"reserved field name(s): {', '.join(sorted(clash))}")
    if layout is MessageLayout.HEADER_ONLY and body_fields:
        raise SerializationError("HEADER_ONLY layout does not carry business fields")

    header = Header.new(
        app_handle, user_handle, version=version, crypto=crypto, reference=reference
    )
    payload: dict[str, Any] = {"header": header.to_dict()}
    if message is not None:
        payload["message"] = message
    payload.update(body_fields)

    canonical = CanonicalMessage(body=_dumps(payload), reference=header.reference)
    logger.debug(
        "built message reference=%s layout=%s bytes=%d",
        header.reference,
        layout.value,
        len(canonical),
    )
    return canonical


__all__: tuple[str, ...] = (
    "CRYPTO_ETH",
    "PROTOCOL_VERSION",
    "CanonicalMessage",
    "Header",
    "MessageLayout",
    "build_message",
)
