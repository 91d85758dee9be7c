from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.registry import register_discovered_tools
from sodium_mcp.transports.http.config import HttpConfig

log = logging.getLogger(__name__)


def build_fastmcp(client: SodiumClient, cfg: HttpConfig | None = None) -> FastMCP:
    """Create a FastMCP instance for streamable HTTP with every tool registered."""
    cfg = cfg or HttpConfig.from_env()

    fastmcp = FastMCP(
        "sodium-mcp",
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
    )
    names = register_discovered_tools(fastmcp, lambda: client)
    log.info("Registered %d tools for streamable HTTP at %s", len(names), cfg.path)
    return fastmcp


__all__ = ["build_fastmcp"]
