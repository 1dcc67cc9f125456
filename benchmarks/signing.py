"""
Benchmark request authentication: message build, Keccak-256 digest, and
app-only vs dual signing. Reports time per call and peak memory (tracemalloc).

Run from repo root:

  PYTHONPATH=src python benchmarks/signing.py

Or after pip install -e .:

  python benchmarks/signing.py
"""

from __future__ import annotations

import os
import sys
import time
import tracemalloc

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src = os.path.join(_root, "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from silasign import (KeyMaterial, authenticate_sync, build_message, keccak256,
                      verify_signature)

N_TIME = 50
N_MEM = 20
APP_KEY = KeyMaterial.from_private_key(bytes(31) + bytes([1]))
USER_KEY = KeyMaterial.from_private_key(bytes(31) + bytes([2]))
FIELDS = {"amount": 100, "account_name": "default", "descriptor": "bench"}


def _time_per_call(fn, *args, n: int = N_TIME, **kwargs) -> float:
    for _ in range(5):
        fn(*args, **kwargs)
    start = time.perf_counter()
    for _ in range(n):
        fn(*args, **kwargs)
    return (time.perf_counter() - start) / n


def _peak_kb(fn, *args, n: int = N_MEM, **kwargs) -> float:
    tracemalloc.start()
    tracemalloc.reset_peak()
    for _ in range(n):
        fn(*args, **kwargs)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def main() -> None:
    message = build_message("user.silamoney.eth", "app.silamoney.eth", FIELDS, message="issue_msg")

    # Sanity
    signatures = authenticate_sync(message, APP_KEY, USER_KEY)
    assert verify_signature(message.digest(), signatures.app_signature, APP_KEY.address)
    assert verify_signature(message.digest(), signatures.user_signature, USER_KEY.address)
    print("Benchmark: request authentication (pure Python)")
    print(f"  body {len(message)} bytes, n = {N_TIME} (time), {N_MEM} (memory)")
    print()

    t = _time_per_call(
        build_message, "user.silamoney.eth", "app.silamoney.eth", FIELDS, message="issue_msg"
    )
    print(f"  build_message             {t * 1000:.4f} ms")
    t = _time_per_call(keccak256, message.body)
    print(f"  keccak256(body)           {t * 1000:.4f} ms")
    t_app = _time_per_call(authenticate_sync, message, APP_KEY)
    print(f"  authenticate (app only)   {t_app * 1000:.4f} ms")
    t_dual = _time_per_call(authenticate_sync, message, APP_KEY, USER_KEY)
    print(f"  authenticate (app + user) {t_dual * 1000:.4f} ms  -> {t_dual / t_app:.2f}x")
    print()

    print("  --- Peak memory (KiB) ---")
    print(f"  authenticate (app + user) {_peak_kb(authenticate_sync, message, APP_KEY, USER_KEY):.2f}")


if __name__ == "__main__":
    main()
