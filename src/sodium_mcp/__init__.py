"""sodium_mcp package exports."""

from .core import (
    SodiumClient,
    SodiumClientError,
    SodiumConfig,
    SodiumHTTPError,
    SodiumParseError,
    discover_tool_modules,
    register_discovered_tools,
)
from .transports.stdio.main import run as run_server

__all__ = [
    # Client
    "SodiumClient",
    "SodiumConfig",
    # Exceptions
    "SodiumClientError",
    "SodiumHTTPError",
    "SodiumParseError",
    # Server utilities
    "run_server",
    "discover_tool_modules",
    "register_discovered_tools",
]
