"""
Dual-signature orchestration.

One canonical message, one digest, up to two signatures over that digest:
the application's (``authsignature``) and optionally the end user's
(``usersignature``). Either every required signature is produced or the call
fails; there is no partially signed result.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .errors import EncodingError, SigningError
from .keys import KeyMaterial
from .message import CanonicalMessage
from .signing import LocalSigner, Signer

logger = logging.getLogger(__name__)

USER_SIGNATURE_HEADER = "usersignature"
APP_SIGNATURE_HEADER = "authsignature"


@dataclass(frozen=True)
class SignatureSet:
    """Hex signatures (130 chars, no 0x) of one digest."""

    app_signature: str
    user_signature: str | None = None

    def headers(self) -> dict[str, str]:
        """Request headers; ``usersignature`` is omitted when there is none."""
        out = {APP_SIGNATURE_HEADER: self.app_signature}
        if self.user_signature is not None:
            out[USER_SIGNATURE_HEADER] = self.user_signature
        return out


@dataclass(frozen=True)
class AuthenticatedRequest:
    """A canonical message paired with the signatures computed from its bytes."""

    message: CanonicalMessage
    signatures: SignatureSet

    @property
    def body(self) -> bytes:
        return self.message.body

    def headers(self) -> dict[str, str]:
        return self.signatures.headers()


async def _sign_hex(signer: Signer, key: KeyMaterial, digest: bytes) -> str:
    try:
        signature = await signer.sign(key, digest)
    except (SigningError, EncodingError):
        raise
    except Exception as e:
        raise SigningError(f"signer failed for {key.checksum_address}: {e}") from e
    return signature.hex()


async def _sign_both(
    signer: Signer, app_key: KeyMaterial, user_key: KeyMaterial, digest: bytes
) -> tuple[str, str]:
    """Sign with both keys concurrently; the first failure cancels the other signing."""
    tasks = [
        asyncio.ensure_future(_sign_hex(signer, app_key, digest)),
        asyncio.ensure_future(_sign_hex(signer, user_key, digest)),
    ]
    try:
        app_signature, user_signature = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Executor work that already started still finishes; its result is dropped.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return app_signature, user_signature


async def authenticate(
    message: CanonicalMessage,
    app_key: KeyMaterial,
    user_key: KeyMaterial | None = None,
    signer: Signer | None = None,
) -> SignatureSet:
    """
    Sign ``message`` with the application key and, if given, the user key.

    The digest is computed once and both signings run concurrently over it.
    If either fails, the other is cancelled before the error propagates.

    Args:
        message: Canonical message to sign.
        app_key: Application key material (always required).
        user_key: End-user key material, or None for application-only calls.
        signer: Signing back-end; defaults to LocalSigner().

    Returns:
        SignatureSet with ``user_signature`` None when ``user_key`` is None.

    Raises:
        SigningError: either signing failed.
        EncodingError: a signer returned a malformed signature.
    """
    signer = signer if signer is not None else LocalSigner()
    digest = message.digest()
    if user_key is None:
        app_signature = await _sign_hex(signer, app_key, digest)
        user_signature = None
    else:
        app_signature, user_signature = await _sign_both(signer, app_key, user_key, digest)
    logger.debug(
        "signed reference=%s digest=%s user_signature=%s",
        message.reference,
        digest.hex(),
        user_signature is not None,
    )
    return SignatureSet(app_signature=app_signature, user_signature=user_signature)


async def authenticate_request(
    message: CanonicalMessage,
    app_key: KeyMaterial,
    user_key: KeyMaterial | None = None,
    signer: Signer | None = None,
) -> AuthenticatedRequest:
    """authenticate() and pair the result with the exact message it signed."""
    signatures = await authenticate(message, app_key, user_key, signer)
    return AuthenticatedRequest(message=message, signatures=signatures)


def authenticate_sync(
    message: CanonicalMessage,
    app_key: KeyMaterial,
    user_key: KeyMaterial | None = None,
    signer: Signer | None = None,
) -> SignatureSet:
    """Blocking authenticate() for callers without an event loop."""
    return asyncio.run(authenticate(message, app_key, user_key, signer))


__all__: tuple[str, ...] = (
    "APP_SIGNATURE_HEADER",
    "USER_SIGNATURE_HEADER",
    "AuthenticatedRequest",
    "SignatureSet",
    "authenticate",
    "authenticate_request",
    "authenticate_sync",
)
