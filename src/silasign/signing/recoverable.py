"""
Ethereum 65-byte recoverable signatures: r (32) || s (32) || v, with v = recovery id + 27.

The +27 offset is what the gateway's verifier (eth-crypto style personal
signatures) expects; 0x1b for recovery id 0, 0x1c for 1.
"""

from __future__ import annotations

from ..curves import CURVE_ORDER, pubkey_to_address, recover_pubkey, to_checksum_address
from ..errors import EncodingError

V_OFFSET = 27
SIGNATURE_SIZE = 65


def encode_signature(r: int, s: int, recovery_id: int) -> bytes:
    """
    Encode (r, s, recovery_id) into the 65-byte wire layout.

    Args:
        r, s: Signature scalars in [1, n).
        recovery_id: 0 or 1.

    Returns:
        65 bytes: r big-endian, s big-endian, recovery_id + 27.

    Raises:
        EncodingError: r or s out of range, or recovery_id not 0/1.
    """
    if not 0 < r < CURVE_ORDER or not 0 < s < CURVE_ORDER:
        raise EncodingError("signature scalar out of range")
    if recovery_id not in (0, 1):
        raise EncodingError(f"recovery id must be 0 or 1, got {recovery_id!r}")
    return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([recovery_id + V_OFFSET])


def signature_hex(r: int, s: int, recovery_id: int) -> str:
    """Lowercase hex (130 chars, no 0x) of encode_signature(r, s, recovery_id)."""
    return encode_signature(r, s, recovery_id).hex()


def decode_signature(signature: bytes | str) -> tuple[int, int, int]:
    """
    Split a 65-byte signature into (r, s, recovery_id).

    Accepts raw bytes or hex (0x prefix optional); v may be 27/28 or 0/1.
    """
    if isinstance(signature, str):
        text = signature[2:] if signature.startswith("0x") else signature
        try:
            signature = bytes.fromhex(text)
        except ValueError as e:
            raise EncodingError("signature is not valid hex") from e
    if len(signature) != SIGNATURE_SIZE:
        raise EncodingError(f"signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}")
    v = signature[64]
    recovery_id = v - V_OFFSET if v >= V_OFFSET else v
    if recovery_id not in (0, 1):
        raise EncodingError(f"invalid v byte {v:#04x}")
    return (
        int.from_bytes(signature[:32], "big"),
        int.from_bytes(signature[32:64], "big"),
        recovery_id,
    )


def recover_address(digest: bytes, signature: bytes | str) -> str:
    """EIP-55 address of the key that produced ``signature`` over ``digest``."""
    r, s, recovery_id = decode_signature(signature)
    try:
        pubkey = recover_pubkey(digest, r, s, recovery_id)
    except ValueError as e:
        raise EncodingError(f"cannot recover signer: {e}") from e
    return to_checksum_address(pubkey_to_address(pubkey))


def verify_signature(digest: bytes, signature: bytes | str, address: bytes | str) -> bool:
    """True iff ``signature`` over ``digest`` recovers to ``address``."""
    try:
        return recover_address(digest, signature) == to_checksum_address(address)
    except (EncodingError, ValueError):
        return False


__all__: tuple[str, ...] = (
    "SIGNATURE_SIZE",
    "V_OFFSET",
    "decode_signature",
    "encode_signature",
    "recover_address",
    "signature_hex",
    "verify_signature",
)
