"""
Signer capability: the boundary between the orchestrator and key storage.

The orchestrator only ever calls ``await signer.sign(key, digest)``. A local
private key, a remote KMS or a hardware token are interchangeable behind it.

Concrete implementations:
    - LocalSigner: secp256k1 ECDSA with the key held in KeyMaterial.
    - CallbackSigner: adapts a caller function (sync or async) for remote back-ends.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol, runtime_checkable

from ..curves import privkey_to_pubkey, pubkey_to_address, sign_recoverable
from ..errors import SigningError
from ..keys import KeyMaterial
from .recoverable import encode_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecoverableSignature:
    """Curve-level signature: scalars r, s and the recovery id."""

    r: int
    s: int
    recovery_id: int

    def encode(self) -> bytes:
        """65-byte Ethereum layout; raises EncodingError on malformed values."""
        return encode_signature(self.r, self.s, self.recovery_id)

    def hex(self) -> str:
        return self.encode().hex()


@runtime_checkable
class Signer(Protocol):
    """Produces a recoverable signature for a 32-byte digest on behalf of ``key``."""

    async def sign(self, key: KeyMaterial, digest: bytes) -> RecoverableSignature:
        """
        Sign ``digest`` with the key identified by ``key``.

        Raises:
            SigningError: key material missing or malformed, or the back-end
                is unreachable or declined.
        """
        ...


class LocalSigner:
    """
    Signs in-process with ``key.private_key``.

    The curve arithmetic is pure Python and CPU-bound, so sign() runs it in
    an executor; the event loop keeps serving other tasks meanwhile.

    Args:
        check_address: Reject keys whose private key does not derive
            ``key.address``. The gateway would reject such a signature anyway,
            after the round trip.
        executor: Where sign() runs the computation; None means the loop's
            default thread pool.
    """

    def __init__(
        self, *, check_address: bool = True, executor: Executor | None = None
    ) -> None:
        self._check_address = check_address
        self._executor = executor

    async def sign(self, key: KeyMaterial, digest: bytes) -> RecoverableSignature:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.sign_sync, key, digest)

    def sign_sync(self, key: KeyMaterial, digest: bytes) -> RecoverableSignature:
        if key.private_key is None:
            raise SigningError(
                f"no private key for {key.checksum_address} and no remote signer configured"
            )
        if len(digest) != 32:
            raise SigningError("digest must be 32 bytes")
        try:
            if self._check_address:
                derived = pubkey_to_address(privkey_to_pubkey(key.private_key))
                if derived != key.address:
                    raise SigningError(
                        f"private key does not belong to {key.checksum_address}"
                    )
            r, s, recovery_id = sign_recoverable(key.private_key, digest)
        except ValueError as e:
            raise SigningError(f"invalid private key: {e}") from e
        return RecoverableSignature(r, s, recovery_id)


SignatureLike = RecoverableSignature | tuple[int, int, int]
SignCallback = Callable[[KeyMaterial, bytes], SignatureLike | Awaitable[SignatureLike]]


class CallbackSigner:
    """
    Wraps a function ``(key, digest) -> (r, s, recovery_id)`` as a Signer.

    The function may be sync or async and may return a RecoverableSignature or
    a plain tuple. Failures other than SigningError are reported as SigningError
    with the original exception chained.
    """

    def __init__(self, func: SignCallback, *, name: str | None = None) -> None:
        self._func = func
        self._name = name or getattr(func, "__name__", "callback")

    async def sign(self, key: KeyMaterial, digest: bytes) -> RecoverableSignature:
        try:
            result = self._func(key, digest)
            if inspect.isawaitable(result):
                result = await result
        except SigningError:
            raise
        except Exception as e:
            logger.warning("signer %s failed for %s: %s", self._name, key.checksum_address, e)
            raise SigningError(f"signer {self._name} failed: {e}") from e
        if isinstance(result, RecoverableSignature):
            return result
        try:
            r, s, recovery_id = (int(v) for v in result)
        except (TypeError, ValueError) as e:
            raise SigningError(
                f"signer {self._name} returned {type(result).__name__}, expected (r, s, recovery_id)"
            ) from e
        return RecoverableSignature(r, s, recovery_id)


__all__: tuple[str, ...] = (
    "CallbackSigner",
    "LocalSigner",
    "RecoverableSignature",
    "SignCallback",
    "Signer",
)
