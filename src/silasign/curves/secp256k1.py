"""
secp256k1 (Ethereum curve): key derivation, addresses, recoverable ECDSA, public key recovery.

Signing uses RFC 6979 deterministic nonces (HMAC-SHA256) and low-s normalization,
so signatures match libsecp256k1 / eth_account for the same key and digest.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Iterator

from ..hashes import keccak256

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_Gx = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_Gy = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

CURVE_ORDER = _N


def _mod_inv(a: int, n: int) -> int:
    """Modular inverse via extended gcd."""
    a %= n
    t, r = 0, n
    new_t, new_r = 1, a
    while new_r:
        q = r // new_r
        t, new_t = new_t, t - q * new_t
        r, new_r = new_r, r - q * new_r
    if r != 1:
        raise ValueError("no inverse")
    return t % n


def _point_add(px: int, py: int, qx: int, qy: int) -> tuple[int, int]:
    """Add two points in affine coords; (0, 0) is the identity."""
    if (px, py) == (0, 0):
        return (qx, qy)
    if (qx, qy) == (0, 0):
        return (px, py)
    if px == qx:
        if py != qy:
            return (0, 0)
        lam = 3 * px * px * _mod_inv(2 * py, _P) % _P
    else:
        lam = (qy - py) * _mod_inv(qx - px, _P) % _P
    rx = (lam * lam - px - qx) % _P
    ry = (lam * (px - rx) - py) % _P
    return (rx, ry)


def _point_mul(d: int, x: int, y: int) -> tuple[int, int]:
    """Scalar multiplication d * (x, y) by double-and-add."""
    d %= _N
    rx, ry = 0, 0
    while d:
        if d & 1:
            rx, ry = _point_add(rx, ry, x, y)
        x, y = _point_add(x, y, x, y)
        d >>= 1
    return (rx, ry)


def _encode_point(x: int, y: int) -> bytes:
    return b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")


def _privkey_scalar(privkey: bytes) -> int:
    if len(privkey) != 32:
        raise ValueError("privkey must be 32 bytes")
    d = int.from_bytes(privkey, "big")
    if d == 0 or d >= _N:
        raise ValueError("privkey out of range")
    return d


def privkey_to_pubkey(privkey: bytes) -> bytes:
    """
    Derive the uncompressed public key (65 bytes: 0x04 || x || y) from a 32-byte private key.

    Raises:
        ValueError: privkey is not 32 bytes or not in [1, n).
    """
    x, y = _point_mul(_privkey_scalar(privkey), _Gx, _Gy)
    return _encode_point(x, y)


def pubkey_to_address(pubkey: bytes) -> bytes:
    """20-byte account address: last 20 bytes of keccak256(x || y)."""
    if len(pubkey) != 65 or pubkey[0] != 0x04:
        raise ValueError("pubkey must be 65 bytes, uncompressed")
    return keccak256(pubkey[1:])[12:]


def privkey_to_address(privkey: bytes) -> str:
    """
    Ethereum address (0x + 40 lowercase hex) for a 32-byte private key.
    """
    return "0x" + pubkey_to_address(privkey_to_pubkey(privkey)).hex()


def to_checksum_address(address: bytes | str) -> str:
    """
    EIP-55 mixed-case checksum form of a 20-byte address.

    Args:
        address: 20 raw bytes, or 40 hex chars with or without 0x prefix.
    """
    if isinstance(address, str):
        address = bytes.fromhex(address[2:] if address.startswith("0x") else address)
    if len(address) != 20:
        raise ValueError("address must be 20 bytes")
    lower = address.hex()
    nibbles = keccak256(lower.encode("ascii")).hex()
    return "0x" + "".join(
        c.upper() if int(nibbles[i], 16) >= 8 else c for i, c in enumerate(lower)
    )


def _rfc6979_nonces(d: int, msg_hash: bytes) -> Iterator[int]:
    """Candidate nonces k in [1, n) per RFC 6979 section 3.2 with HMAC-SHA256."""
    x = d.to_bytes(32, "big")
    h = (int.from_bytes(msg_hash, "big") % _N).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = hmac.new(k, v + b"\x00" + x + h, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()
    k = hmac.new(k, v + b"\x01" + x + h, hashlib.sha256).digest()
    v = hmac.new(k, v, hashlib.sha256).digest()
    while True:
        v = hmac.new(k, v, hashlib.sha256).digest()
        candidate = int.from_bytes(v, "big")
        if 1 <= candidate < _N:
            yield candidate
        k = hmac.new(k, v + b"\x00", hashlib.sha256).digest()
        v = hmac.new(k, v, hashlib.sha256).digest()


def sign_recoverable(privkey: bytes, msg_hash: bytes) -> tuple[int, int, int]:
    """
    ECDSA sign with recovery id.

    Args:
        privkey: 32-byte private key.
        msg_hash: 32-byte digest to sign.

    Returns:
        (r, s, recid) with s in the lower half of the order. recid is 0 or 1
        except when R.x >= n (probability ~2^-127), where bit 1 is also set.
    """
    if len(msg_hash) != 32:
        raise ValueError("msg_hash must be 32 bytes")
    d = _privkey_scalar(privkey)
    z = int.from_bytes(msg_hash, "big") % _N
    for k in _rfc6979_nonces(d, msg_hash):
        kx, ky = _point_mul(k, _Gx, _Gy)
        r = kx % _N
        if r == 0:
            continue
        s = _mod_inv(k, _N) * (z + r * d) % _N
        if s == 0:
            continue
        recid = (ky & 1) | (2 if kx >= _N else 0)
        if s > _N // 2:
            s = _N - s
            recid ^= 1
        return (r, s, recid)
    raise AssertionError("unreachable")


def _recover_point(msg_hash: bytes, r: int, s: int, recid: int) -> tuple[int, int]:
    """Q = r^-1 (s R - z G); recid bit 1 selects x = r + n, bit 0 the y parity."""
    if not (0 < r < _N and 0 < s < _N):
        raise ValueError("r and s must be in [1, n)")
    if not 0 <= recid <= 3:
        raise ValueError("recid must be 0..3")
    x = r + _N if recid & 2 else r
    if x >= _P:
        raise ValueError("recid 2/3 but r + n >= p")
    rhs = (x * x * x + 7) % _P
    y = pow(rhs, (_P + 1) // 4, _P)
    if y * y % _P != rhs:
        raise ValueError("r is not the x-coordinate of a curve point")
    if (y & 1) != (recid & 1):
        y = _P - y
    r_inv = _mod_inv(r, _N)
    z = int.from_bytes(msg_hash, "big") % _N
    gx, gy = _point_mul(-z * r_inv % _N, _Gx, _Gy)
    qx, qy = _point_mul(s * r_inv % _N, x, y)
    qx, qy = _point_add(gx, gy, qx, qy)
    if (qx, qy) == (0, 0):
        raise ValueError("recovered point at infinity")
    return (qx, qy)


def recover_pubkey(msg_hash: bytes, r: int, s: int, recid: int) -> bytes:
    """
    Recover the uncompressed public key (65 bytes) from (msg_hash, r, s, recid).

    Raises:
        ValueError: the signature does not correspond to any public key.
    """
    if len(msg_hash) != 32:
        raise ValueError("msg_hash must be 32 bytes")
    return _encode_point(*_recover_point(msg_hash, r, s, recid))


__all__: tuple[str, ...] = (
    "CURVE_ORDER",
    "privkey_to_address",
    "privkey_to_pubkey",
    "pubkey_to_address",
    "recover_pubkey",
    "sign_recoverable",
    "to_checksum_address",
)
