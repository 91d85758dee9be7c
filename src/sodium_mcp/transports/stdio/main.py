from __future__ import annotations

import asyncio
import os

from mcp.server.fastmcp import FastMCP

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.config import SodiumConfig
from sodium_mcp.core.logging import setup_logging
from sodium_mcp.core.registry import register_discovered_tools


async def main() -> None:
    setup_logging(os.getenv("SODIUM_LOG_LEVEL", "INFO"))
    # Fails fast on a missing key or tenant, before any tool is registered
    client = SodiumClient(SodiumConfig.from_env(use_dotenv=True))

    app = FastMCP("sodium-mcp")
    register_discovered_tools(app, lambda: client)

    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
