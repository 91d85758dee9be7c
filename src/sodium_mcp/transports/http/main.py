from __future__ import annotations

import asyncio
import os

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.config import SodiumConfig
from sodium_mcp.core.logging import setup_logging

from .app import build_fastmcp
from .config import HttpConfig


async def main() -> None:
    setup_logging(os.getenv("SODIUM_LOG_LEVEL", "INFO"))
    cfg = HttpConfig.from_env()
    client = SodiumClient(SodiumConfig.from_env(use_dotenv=True))
    fastmcp = build_fastmcp(client, cfg)
    try:
        await fastmcp.run_streamable_http_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
