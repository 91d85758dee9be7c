"""Core domain surface for sodium-mcp (transport-agnostic)."""

from .client import SodiumClient, build_query
from .config import SodiumConfig, load_env_config
from .errors import (
    MissingApiKeyError,
    MissingTenantError,
    SodiumClientError,
    SodiumConfigError,
    SodiumHTTPError,
    SodiumParseError,
    ensure_error_message,
)
from .pagination import page_items
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)

__all__ = [
    # Client
    "SodiumClient",
    "build_query",
    "page_items",
    # Exceptions
    "SodiumClientError",
    "SodiumHTTPError",
    "SodiumParseError",
    "SodiumConfigError",
    "MissingApiKeyError",
    "MissingTenantError",
    "ensure_error_message",
    # Config helpers
    "SodiumConfig",
    "load_env_config",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
