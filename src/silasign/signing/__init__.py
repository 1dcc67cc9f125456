"""Signing: recoverable-signature encoding and the Signer capability."""

from .recoverable import (SIGNATURE_SIZE, V_OFFSET, decode_signature,
                          encode_signature, recover_address, signature_hex,
                          verify_signature)
from .signer import (CallbackSigner, LocalSigner, RecoverableSignature,
                     SignCallback, Signer)

__all__: tuple[str, ...] = (
    "SIGNATURE_SIZE",
    "V_OFFSET",
    "CallbackSigner",
    "LocalSigner",
    "RecoverableSignature",
    "SignCallback",
    "Signer",
    "decode_signature",
    "encode_signature",
    "recover_address",
    "signature_hex",
    "verify_signature",
)
