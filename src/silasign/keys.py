"""
Key material: an account address plus an optional private key.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .curves import privkey_to_pubkey, pubkey_to_address, to_checksum_address
from .errors import SigningError


def _parse_hex(value: str, size: int, what: str) -> bytes:
    text = value[2:] if value[:2] in ("0x", "0X") else value
    try:
        raw = bytes.fromhex(text)
    except ValueError as e:
        raise SigningError(f"{what} is not valid hex") from e
    if len(raw) != size:
        raise SigningError(f"{what} must be {size} bytes, got {len(raw)}")
    return raw


@dataclass(frozen=True)
class KeyMaterial:
    """
    Signing identity for one key holder (the application or an end user).

    ``private_key`` may be None when signing is delegated to a remote signer
    that holds the key itself. It is excluded from repr.
    """

    address: bytes
    private_key: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if len(self.address) != 20:
            raise SigningError("address must be 20 bytes")

    @classmethod
    def from_hex(cls, address: str, private_key: str | None = None) -> KeyMaterial:
        """Parse 0x-prefixed (or bare) hex address and private key."""
        return cls(
            address=_parse_hex(address, 20, "address"),
            private_key=(
                _parse_hex(private_key, 32, "private key")
                if private_key is not None
                else None
            ),
        )

    @classmethod
    def from_private_key(cls, private_key: bytes | str) -> KeyMaterial:
        """Key material whose address is derived from the private key."""
        if isinstance(private_key, str):
            private_key = _parse_hex(private_key, 32, "private key")
        try:
            address = pubkey_to_address(privkey_to_pubkey(private_key))
        except ValueError as e:
            raise SigningError(f"invalid private key: {e}") from e
        return cls(address=address, private_key=private_key)

    @property
    def checksum_address(self) -> str:
        return to_checksum_address(self.address)

    @property
    def has_private_key(self) -> bool:
        return self.private_key is not None


__all__: tuple[str, ...] = ("KeyMaterial",)
