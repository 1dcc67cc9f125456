#!/usr/bin/env python3
"""
Example: ask the gateway whether a user handle is free.

Reads SILA_GATEWAY, SILA_APP_HANDLE, SILA_APP_ADDRESS and SILA_APP_KEY from
the environment.

  python examples/check_handle.py some.new.handle
"""

import asyncio
import logging
import sys

from silasign import GatewayConfig, GatewayError, SilaClient
from silasign.endpoints import CHECK_HANDLE


async def main(handle: str) -> int:
    config = GatewayConfig.from_env()
    async with SilaClient(config) as client:
        try:
            response = await client.call(CHECK_HANDLE, user_handle=handle)
        except GatewayError as e:
            print(f"{e.error_code}: {e}")
            return 1
    print(response.status, response.message)
    return 0 if response.ok else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "new.user")))
