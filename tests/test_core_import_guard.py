import importlib.util
from pathlib import Path

import pytest


@pytest.fixture(scope="module")
def guard():
    script = (
        Path(__file__).resolve().parent.parent / "scripts" / "check_core_imports.py"
    )
    spec = importlib.util.spec_from_file_location("check_core_imports", script)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None  # for mypy
    spec.loader.exec_module(module)
    return module


def test_core_import_guard_passes(guard):
    assert guard.main() == 0, "core import guard failed"


def test_scan_file_reports_transport_imports(guard, tmp_path):
    source = tmp_path / "leaky.py"
    source.write_text(
        "import httpx\n"
        "from mcp.server.fastmcp import FastMCP\n"
        "from sodium_mcp.transports.http import build_fastmcp\n"
        "from .client import SodiumClient\n",
        encoding="utf-8",
    )

    errors = guard.scan_file(source)

    assert errors == [
        f"{source}:2: forbidden import 'mcp.server.fastmcp'",
        f"{source}:3: forbidden import 'sodium_mcp.transports.http'",
    ]


@pytest.mark.parametrize(
    "module,expected",
    [
        ("mcp.server", True),
        ("mcp.types", False),
        ("starlette.responses", True),
        ("starlettex", False),
        ("httpx", False),
    ],
)
def test_is_forbidden(guard, module, expected):
    assert guard.is_forbidden(module) is expected
