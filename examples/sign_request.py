#!/usr/bin/env python3
"""Example: build a canonical message and sign it with an app key and a user key."""

from silasign import (
    KeyMaterial,
    authenticate_sync,
    build_message,
    recover_address,
)

app_key = KeyMaterial.from_private_key(bytes(31) + bytes([1]))
user_key = KeyMaterial.from_private_key(
    "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
)
print("App address: ", app_key.checksum_address)
print("User address:", user_key.checksum_address)

message = build_message(
    "user.silamoney.eth", "app.silamoney.eth", {"amount": 100}, message="issue_msg"
)
print("Body:", message.text)
print("Digest:", message.digest().hex())

signatures = authenticate_sync(message, app_key, user_key)
for name, value in signatures.headers().items():
    print(f"{name}: {value}")
    print("  recovers to", recover_address(message.digest(), value))
