"""Tests for key material and the Signer implementations."""

from __future__ import annotations

import asyncio

import pytest

from silasign import (
    CallbackSigner,
    EncodingError,
    KeyMaterial,
    LocalSigner,
    RecoverableSignature,
    Signer,
    SigningError,
    keccak256,
    recover_address,
    sign_recoverable,
)

PRIV_ONE = bytes(31) + bytes([1])
ADDR_ONE = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
DOC_PRIV_HEX = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
DOC_ADDR = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
DIGEST = keccak256(b"digest under test")


def test_key_material_from_private_key() -> None:
    key = KeyMaterial.from_private_key(PRIV_ONE)
    assert key.checksum_address == ADDR_ONE
    assert key.has_private_key
    assert KeyMaterial.from_private_key(DOC_PRIV_HEX).checksum_address == DOC_ADDR


def test_key_material_from_hex() -> None:
    key = KeyMaterial.from_hex(DOC_ADDR)
    assert key.checksum_address == DOC_ADDR
    assert key.private_key is None
    assert not key.has_private_key
    key = KeyMaterial.from_hex(DOC_ADDR[2:], DOC_PRIV_HEX[2:])
    assert key.private_key == bytes.fromhex(DOC_PRIV_HEX[2:])


@pytest.mark.parametrize(
    "address, private_key",
    [("0x1234", None), ("not hex", None), (DOC_ADDR, "0x1234"), (DOC_ADDR, "zz" * 32)],
)
def test_key_material_rejects_malformed_hex(address: str, private_key: str | None) -> None:
    with pytest.raises(SigningError):
        KeyMaterial.from_hex(address, private_key)


def test_key_material_rejects_out_of_range_private_key() -> None:
    with pytest.raises(SigningError):
        KeyMaterial.from_private_key(bytes(32))


def test_key_material_repr_hides_private_key() -> None:
    key = KeyMaterial.from_hex(DOC_ADDR, DOC_PRIV_HEX)
    assert DOC_PRIV_HEX[2:] not in repr(key)


def test_signers_satisfy_protocol() -> None:
    assert isinstance(LocalSigner(), Signer)
    assert isinstance(CallbackSigner(lambda key, digest: (1, 1, 0)), Signer)


def test_local_signer_recovers_to_key_address() -> None:
    key = KeyMaterial.from_private_key(DOC_PRIV_HEX)
    signature = asyncio.run(LocalSigner().sign(key, DIGEST))
    assert isinstance(signature, RecoverableSignature)
    assert signature.recovery_id in (0, 1)
    assert recover_address(DIGEST, signature.encode()) == DOC_ADDR
    assert signature.hex()[-2:] in ("1b", "1c")


def test_local_signer_requires_private_key() -> None:
    with pytest.raises(SigningError):
        asyncio.run(LocalSigner().sign(KeyMaterial.from_hex(DOC_ADDR), DIGEST))


def test_local_signer_rejects_short_digest() -> None:
    key = KeyMaterial.from_private_key(PRIV_ONE)
    with pytest.raises(SigningError):
        LocalSigner().sign_sync(key, DIGEST[:31])


def test_local_signer_checks_address() -> None:
    mismatched = KeyMaterial.from_hex(DOC_ADDR, "0x" + PRIV_ONE.hex())
    with pytest.raises(SigningError):
        LocalSigner().sign_sync(mismatched, DIGEST)
    # without the check the signature is produced but recovers elsewhere
    signature = LocalSigner(check_address=False).sign_sync(mismatched, DIGEST)
    assert recover_address(DIGEST, signature.encode()) == ADDR_ONE


def test_callback_signer_sync_tuple() -> None:
    key = KeyMaterial.from_hex(ADDR_ONE)

    def remote(k: KeyMaterial, digest: bytes) -> tuple[int, int, int]:
        assert k is key
        return sign_recoverable(PRIV_ONE, digest)

    signature = asyncio.run(CallbackSigner(remote).sign(key, DIGEST))
    assert recover_address(DIGEST, signature.encode()) == ADDR_ONE


def test_callback_signer_async() -> None:
    key = KeyMaterial.from_hex(ADDR_ONE)

    async def remote(k: KeyMaterial, digest: bytes) -> RecoverableSignature:
        await asyncio.sleep(0)
        return RecoverableSignature(*sign_recoverable(PRIV_ONE, digest))

    signature = asyncio.run(CallbackSigner(remote).sign(key, DIGEST))
    assert recover_address(DIGEST, signature.hex()) == ADDR_ONE


def test_callback_signer_wraps_failures() -> None:
    def remote(k: KeyMaterial, digest: bytes) -> tuple[int, int, int]:
        raise ConnectionError("kms unreachable")

    with pytest.raises(SigningError) as excinfo:
        asyncio.run(CallbackSigner(remote, name="kms").sign(KeyMaterial.from_hex(ADDR_ONE), DIGEST))
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert "kms" in str(excinfo.value)


def test_callback_signer_passes_signing_error_through() -> None:
    declined = SigningError("declined by policy")

    async def remote(k: KeyMaterial, digest: bytes) -> tuple[int, int, int]:
        raise declined

    with pytest.raises(SigningError) as excinfo:
        asyncio.run(CallbackSigner(remote).sign(KeyMaterial.from_hex(ADDR_ONE), DIGEST))
    assert excinfo.value is declined


def test_callback_signer_rejects_bad_result() -> None:
    with pytest.raises(SigningError):
        asyncio.run(
            CallbackSigner(lambda k, d: "sig").sign(KeyMaterial.from_hex(ADDR_ONE), DIGEST)
        )


def test_recoverable_signature_encode_rejects_bad_recovery_id() -> None:
    with pytest.raises(EncodingError):
        RecoverableSignature(1, 1, 4).encode()
