"""
Keccak-256 as used by Ethereum (original 0x01 multirate padding, not SHA3-256).
Pure Python; the gateway verifies against this digest bit-for-bit.
"""

from __future__ import annotations

_MASK64 = 0xFFFFFFFFFFFFFFFF
_RATE = 136  # bytes; 1088-bit rate for 256-bit capacity-512 Keccak
_DIGEST_SIZE = 32

_ROUND_CONSTANTS = (
    0x0000000000000001,
    0x0000000000008082,
    0x800000000000808A,
    0x8000000080008000,
    0x000000000000808B,
    0x0000000080000001,
    0x8000000080008081,
    0x8000000000008009,
    0x000000000000008A,
    0x0000000000000088,
    0x0000000080008009,
    0x000000008000000A,
    0x000000008000808B,
    0x800000000000008B,
    0x8000000000008089,
    0x8000000000008003,
    0x8000000000008002,
    0x8000000000000080,
    0x000000000000800A,
    0x800000008000000A,
    0x8000000080008081,
    0x8000000000008080,
    0x0000000080000001,
    0x8000000080008008,
)

# Rotation offset for lane (x, y), indexed [y][x].
_ROTATION = (
    (0, 1, 62, 28, 27),
    (36, 44, 6, 55, 20),
    (3, 10, 43, 25, 39),
    (41, 45, 15, 21, 8),
    (18, 2, 61, 56, 14),
)

# State is a flat list of 25 lanes, lane (x, y) at index x + 5 * y.
# rho+pi moves lane (x, y) to (y, 2x + 3y) after rotating it.
_RHO_PI = tuple(
    (x + 5 * y, y + 5 * ((2 * x + 3 * y) % 5), _ROTATION[y][x])
    for y in range(5)
    for x in range(5)
)


def _rol64(v: int, n: int) -> int:
    return ((v << n) | (v >> (64 - n))) & _MASK64 if n else v


def _keccak_f(a: list[int]) -> None:
    """Keccak-f[1600] permutation, 24 rounds, in place."""
    b = [0] * 25
    for rc in _ROUND_CONSTANTS:
        # theta
        c = [a[x] ^ a[x + 5] ^ a[x + 10] ^ a[x + 15] ^ a[x + 20] for x in range(5)]
        for x in range(5):
            d = c[(x - 1) % 5] ^ _rol64(c[(x + 1) % 5], 1)
            for y in range(0, 25, 5):
                a[x + y] ^= d
        # rho and pi
        for src, dst, rot in _RHO_PI:
            b[dst] = _rol64(a[src], rot)
        # chi
        for y in range(0, 25, 5):
            row = b[y : y + 5]
            for x in range(5):
                a[x + y] = row[x] ^ (~row[(x + 1) % 5] & row[(x + 2) % 5])
        # iota
        a[0] ^= rc


def _pad(data: bytes) -> bytes:
    """Keccak pad10*1 with domain byte 0x01; always adds at least one byte."""
    padlen = _RATE - (len(data) % _RATE)
    if padlen == 1:
        return data + b"\x81"
    return data + b"\x01" + b"\x00" * (padlen - 2) + b"\x80"


def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 hash (256-bit output, Ethereum padding).

    Args:
        data: Input bytes (any length).

    Returns:
        32-byte digest.
    """
    state = [0] * 25
    padded = _pad(bytes(data))
    for block in range(0, len(padded), _RATE):
        for i in range(_RATE // 8):
            off = block + i * 8
            state[i] ^= int.from_bytes(padded[off : off + 8], "little")
        _keccak_f(state)
    # 32 bytes fit in the first four lanes of one squeeze.
    return b"".join(
        lane.to_bytes(8, "little") for lane in state[: _DIGEST_SIZE // 8]
    )


__all__: tuple[str, ...] = ("keccak256",)
