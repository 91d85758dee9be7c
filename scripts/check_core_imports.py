#!/usr/bin/env python3
"""
Fail if the SodiumHQ core imports transport-specific modules.
Checks all Python files under src/sodium_mcp/core/; the core must stay usable
without an MCP server or HTTP framework installed.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "sodium_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "starlette",
    "uvicorn",
    "mcp.server",
    "fastmcp",
    "sodium_mcp.transports",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text(encoding="utf-8"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom) and node.level == 0:
            modules = [node.module or ""]
        else:
            continue
        for mod in modules:
            if mod and is_forbidden(mod):
                errors.append(f"{path}:{node.lineno}: forbidden import '{mod}'")
    return errors


def main() -> int:
    if not CORE_DIR.is_dir():
        print(f"core directory not found: {CORE_DIR}", file=sys.stderr)
        return 1

    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
