"""Hash functions: Keccak-256 (Ethereum variant)."""

from .keccak import keccak256

__all__: tuple[str, ...] = ("keccak256",)
