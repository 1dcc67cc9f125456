"""Elliptic-curve crypto: secp256k1 (Ethereum)."""

from .secp256k1 import (CURVE_ORDER, privkey_to_address, privkey_to_pubkey,
                        pubkey_to_address, recover_pubkey, sign_recoverable,
                        to_checksum_address)

__all__: tuple[str, ...] = (
    "CURVE_ORDER",
    "privkey_to_address",
    "privkey_to_pubkey",
    "pubkey_to_address",
    "recover_pubkey",
    "sign_recoverable",
    "to_checksum_address",
)
