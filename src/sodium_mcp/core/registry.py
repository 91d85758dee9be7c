from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterable, List, Set, get_type_hints

from .client import SodiumClient
from .tools._base import ToolResult

log = logging.getLogger("sodium_mcp.core.registry")


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "sodium_mcp.core.tools",
) -> List[ModuleType]:
    """
    Import every public module of the tools package. Private modules
    (``_base``) hold shared helpers and are skipped; a module that fails to
    import is logged and left out so the remaining tools still register.
    """
    package = importlib.import_module(package_name)
    modules: List[ModuleType] = []

    for info in pkgutil.iter_modules(package.__path__, package.__name__ + "."):
        if info.name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            modules.append(importlib.import_module(info.name))
        except Exception as exc:
            log.error("Failed importing tool module %s: %s", info.name, exc)

    return modules


def _takes_client_first(func: Callable) -> bool:
    params = list(inspect.signature(func).parameters)
    return bool(params) and params[0] == "client"


def is_tool_function(func: Callable, module: ModuleType) -> bool:
    """A tool is a public coroutine defined in ``module`` taking ``client`` first."""
    return (
        inspect.iscoroutinefunction(func)
        and not func.__name__.startswith("_")
        and func.__module__ == module.__name__
        and _takes_client_first(func)
    )


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield the module's tools in name order."""
    for name, func in inspect.getmembers(module, callable):
        if is_tool_function(func, module):
            yield func
        elif inspect.iscoroutinefunction(func) and not name.startswith("_"):
            log.debug("Skipping %s.%s: not a tool", module.__name__, name)


def tool_name(func: Callable) -> str:
    """Exposed name of a tool function: list_clients -> list-clients."""
    return func.__name__.replace("_", "-")


# --- Wrapping / registration ---------------------------------------------- #


def _wrap_tool(func: Callable, client_provider: Callable[[], SodiumClient]) -> Callable:
    """
    Return a wrapper that injects the client, hides it from the signature and
    hands the host only the text of the ToolResult.
    """
    original_sig = inspect.signature(func)
    # include_extras keeps Annotated[..., Field(description=...)] intact
    type_hints = get_type_hints(func, include_extras=True)

    new_params = []
    for i, (name, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and name == "client":
            continue  # drop injected client
        ann = type_hints.get(name, param.annotation)
        new_params.append(param.replace(annotation=ann))

    new_sig = inspect.Signature(parameters=new_params, return_annotation=str)

    async def wrapped(*args, **kwargs) -> str:
        client = client_provider()
        result = await func(client, *args, **kwargs)
        if isinstance(result, ToolResult):
            return result.text
        return str(result)

    wrapped.__name__ = tool_name(func)
    wrapped.__doc__ = inspect.getdoc(func)
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Callable[[], SodiumClient] | SodiumClient,
    modules: List[ModuleType] | None = None,
) -> List[str]:
    """
    Register discovered tools on an app that exposes a .tool decorator.
    Returns the registered tool names in registration order.
    """
    if isinstance(client_provider, SodiumClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules or discover_tool_modules()
    seen_names: Set[str] = set()
    registered: List[str] = []

    for module in modules:
        for func in iter_tool_functions(module):
            name = tool_name(func)
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider)
            app.tool(name=name)(wrapped)
            seen_names.add(name)
            registered.append(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return registered


__all__ = [
    "discover_tool_modules",
    "is_tool_function",
    "iter_tool_functions",
    "register_discovered_tools",
    "tool_name",
]
