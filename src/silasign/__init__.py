"""
Request authentication for a dual-signature custody gateway: Keccak-256 over the
exact JSON body, secp256k1 recoverable signatures from the application and the
end user, sent as ``authsignature`` / ``usersignature`` headers.
"""

from .__about__ import __version__
from .auth import (AuthenticatedRequest, SignatureSet, authenticate,
                   authenticate_request, authenticate_sync)
from .client import SilaClient
from .config import GatewayConfig
from .curves import (privkey_to_address, privkey_to_pubkey, pubkey_to_address,
                     recover_pubkey, sign_recoverable, to_checksum_address)
from .errors import (ConfigError, EncodingError, GatewayError,
                     SerializationError, SigningError, SilaSignError)
from .hashes import keccak256
from .keys import KeyMaterial
from .message import CanonicalMessage, Header, MessageLayout, build_message
from .signing import (CallbackSigner, LocalSigner, RecoverableSignature,
                      Signer, decode_signature, encode_signature,
                      recover_address, signature_hex, verify_signature)
from .transport import GatewayResponse, GatewayTransport

__all__: tuple[str, ...] = (
    # About
    "__version__",
    # Hashes
    "keccak256",
    # Curves: secp256k1
    "privkey_to_address",
    "privkey_to_pubkey",
    "pubkey_to_address",
    "recover_pubkey",
    "sign_recoverable",
    "to_checksum_address",
    # Signing
    "CallbackSigner",
    "LocalSigner",
    "RecoverableSignature",
    "Signer",
    "decode_signature",
    "encode_signature",
    "recover_address",
    "signature_hex",
    "verify_signature",
    # Messages
    "CanonicalMessage",
    "Header",
    "KeyMaterial",
    "MessageLayout",
    "build_message",
    # Orchestration
    "AuthenticatedRequest",
    "SignatureSet",
    "authenticate",
    "authenticate_request",
    "authenticate_sync",
    # Gateway
    "GatewayConfig",
    "GatewayResponse",
    "GatewayTransport",
    "SilaClient",
    # Errors
    "ConfigError",
    "EncodingError",
    "GatewayError",
    "SerializationError",
    "SigningError",
    "SilaSignError",
)
