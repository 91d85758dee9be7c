import inspect
from types import ModuleType

import pytest
import respx
from httpx import Response
from mcp.server.fastmcp import FastMCP
from pydantic.fields import FieldInfo
from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.config import SodiumConfig
from sodium_mcp.core.registry import (
    discover_tool_modules,
    register_discovered_tools,
    tool_name,
)
from sodium_mcp.transports.http import HttpConfig, build_fastmcp

BASE = "https://api.sodium.test"

EXPECTED_TOOLS = {
    "list-clients",
    "get-client",
    "create-client",
    "update-client",
    "delete-client",
    "list-client-contacts",
    "get-client-contact",
    "create-client-contact",
    "update-client-contact",
    "delete-client-contact",
    "list-client-notes",
    "get-client-note",
    "create-client-note",
    "update-client-note",
    "delete-client-note",
    "list-tasks",
    "get-task",
    "create-task",
    "update-task",
    "delete-task",
    "list-engagements",
    "get-engagement",
    "create-engagement",
    "update-engagement",
    "delete-engagement",
    "send-engagement-email",
    "get-engagement-emails",
    "get-engagement-settings",
    "upload-proposal-pdf",
    "get-proposal-pdf",
    "upload-loe-pdf",
    "get-loe-pdf",
    "list-services",
    "get-service",
    "list-client-services",
    "create-client-service",
    "update-client-service",
    "list-document-templates",
    "list-service-packages",
    "get-service-package",
}


def _make_module(name: str, code: str) -> ModuleType:
    module = ModuleType(name)
    exec(code, module.__dict__)
    return module


def _recording_app():
    app = FastMCP("test")
    registered = []

    def record_tool(name):
        def decorator(fn):
            registered.append((name, fn))
            return fn

        return decorator

    app.tool = record_tool  # type: ignore[attr-defined]
    return app, registered


@pytest.fixture
def client():
    return SodiumClient(SodiumConfig(api_key="mock-key", tenant="acme", base_url=BASE))


@pytest.mark.asyncio
async def test_register_discovered_tools_registers_valid_tools_only(client):
    code = """
async def tool_fn(client, *, foo: int = 1):
    return f"{client.config.tenant}:{foo}"

async def _private(client):
    return None

async def wrong_first(arg1, client):
    return None

def sync_func(client):
    return None
"""
    mod = _make_module("fake_mod", code)
    app, registered = _recording_app()

    names = register_discovered_tools(app, client, modules=[mod])

    assert names == ["tool-fn"]
    assert [n for n, _ in registered] == ["tool-fn"]

    sig = inspect.signature(registered[0][1])
    assert "client" not in sig.parameters
    assert sig.return_annotation is str

    assert await registered[0][1](foo=5) == "acme:5"


@pytest.mark.asyncio
async def test_wrapped_tool_returns_result_text(client):
    mod = _make_module(
        "result_mod",
        """
from sodium_mcp.core.tools._base import reports_errors

@reports_errors("doing things")
async def do_things(client):
    raise RuntimeError("kaput")
""",
    )
    app, registered = _recording_app()

    register_discovered_tools(app, lambda: client, modules=[mod])

    assert await registered[0][1]() == "Error doing things: kaput"


def test_register_discovered_tools_duplicate_names_raise(client):
    mod1 = _make_module("mod1", "async def tool_fn(client): return None")
    mod2 = _make_module("mod2", "async def tool_fn(client): return None")
    app, _ = _recording_app()

    with pytest.raises(ValueError, match="Duplicate tool name detected: tool-fn"):
        register_discovered_tools(app, client, modules=[mod1, mod2])


def test_register_requires_tool_decorator(client):
    with pytest.raises(TypeError):
        register_discovered_tools(object(), client, modules=[])


def test_discover_tool_modules_skips_import_failures(monkeypatch, caplog):
    import importlib
    import pkgutil

    class Info:
        def __init__(self, name):
            self.name = name

    def fake_iter_modules(path, prefix):
        return [Info(prefix + "_base"), Info(prefix + "good"), Info(prefix + "bad")]

    good_mod = _make_module(
        "sodium_mcp.core.tools.good", "async def tool_fn(client): return None"
    )

    real_import_module = importlib.import_module

    def fake_import_module(name, *args, **kwargs):
        if name == "sodium_mcp.core.tools.bad":
            raise ImportError("boom")
        if name == "sodium_mcp.core.tools.good":
            return good_mod
        return real_import_module(name, *args, **kwargs)

    monkeypatch.setattr(pkgutil, "iter_modules", fake_iter_modules)
    monkeypatch.setattr(importlib, "import_module", fake_import_module)

    with caplog.at_level("ERROR"):
        modules = discover_tool_modules()

    assert [m.__name__ for m in modules] == ["sodium_mcp.core.tools.good"]
    assert any("Failed importing tool module" in rec.message for rec in caplog.records)


def test_all_tools_discovered(client):
    app, registered = _recording_app()

    names = register_discovered_tools(app, client)

    assert len(names) == len(EXPECTED_TOOLS)
    assert set(names) == EXPECTED_TOOLS


def test_wrapped_signature_keeps_field_descriptions(client):
    from sodium_mcp.core.tools.engagements import get_engagement

    app, registered = _recording_app()
    mod = ModuleType(get_engagement.__module__)
    mod.get_engagement = get_engagement

    register_discovered_tools(app, client, modules=[mod])

    name, wrapped = registered[0]
    assert name == tool_name(get_engagement) == "get-engagement"
    assert wrapped.__doc__.startswith("Get detailed information")

    param = inspect.signature(wrapped).parameters["code"]
    assert param.annotation.__origin__ is str
    field = param.annotation.__metadata__[0]
    assert isinstance(field, FieldInfo)
    assert field.description == "The engagement code to retrieve"


@pytest.mark.asyncio
async def test_build_fastmcp_exposes_every_tool_with_schema(client):
    app = build_fastmcp(client, HttpConfig())

    tools = {tool.name: tool for tool in await app.list_tools()}

    assert set(tools) == EXPECTED_TOOLS
    schema = tools["get-engagement"].inputSchema
    assert "client" not in schema["properties"]
    assert schema["required"] == ["code"]
    assert schema["properties"]["code"]["description"] == (
        "The engagement code to retrieve"
    )


@pytest.mark.asyncio
@respx.mock
async def test_registered_tool_reports_http_failure_as_text(client):
    respx.get(f"{BASE}/tenants/acme/engagements/E404").mock(
        return_value=Response(404, json={"message": "Engagement not found"})
    )
    app, registered = _recording_app()
    register_discovered_tools(app, client)
    tools = dict(registered)

    async with client:
        text = await tools["get-engagement"](code="E404")

    assert text == "Error getting engagement: Engagement not found"
