"""
Shared helpers for SodiumHQ tool handlers: the result type returned to the
registry, the error boundary decorator and small text-rendering utilities.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Dict, Iterable, List, Optional

from pydantic import Field

from sodium_mcp.core.errors import ensure_error_message

log = logging.getLogger("sodium_mcp.tools")

RECORD_SEPARATOR = "\n\n---\n\n"

OffsetParam = Annotated[
    Optional[int], Field(description="Number of records to skip (for pagination)")
]
LimitParam = Annotated[
    Optional[int], Field(description="Maximum number of results to return")
]
SortDescParam = Annotated[Optional[bool], Field(description="Sort descending")]


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call; failures are reported as text, never raised."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(text=text)

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)


def reports_errors(
    action: str,
) -> Callable[[Callable[..., Awaitable[str]]], Callable[..., Awaitable[ToolResult]]]:
    """
    Wrap a handler returning report text so that any exception becomes
    ``ToolResult.failure("Error <action>: <message>")``.
    """

    def decorator(func: Callable[..., Awaitable[str]]):
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> ToolResult:
            try:
                text = await func(*args, **kwargs)
            except Exception as exc:
                message = ensure_error_message(exc)
                log.warning(
                    "tool_failed",
                    extra={"tool": func.__name__, "error_type": type(exc).__name__},
                )
                return ToolResult.failure(f"Error {action}: {message}")
            return ToolResult.success(text)

        return wrapper

    return decorator


# --- Rendering helpers ----------------------------------------------------- #


def money(value: Any) -> str:
    return f"£{float(value):.2f}"


def yes_no(flag: Any) -> str:
    return "Yes" if flag else "No"


def ref_label(ref: Any) -> Optional[str]:
    """Name of a {code, name} reference, falling back to its code."""
    if not isinstance(ref, dict):
        return None
    return ref.get("name") or ref.get("code")


def ref_with_code(ref: Any) -> Optional[str]:
    """'Name (CODE)' for a reference that carries a name."""
    if not isinstance(ref, dict) or not ref.get("name"):
        return None
    return f"{ref['name']} ({ref.get('code')})"


def full_name(first: Optional[str], last: Optional[str]) -> str:
    return " ".join(part for part in (first, last) if part)


def pricing_answer_lines(answers: Any, indent: str) -> List[str]:
    if not isinstance(answers, dict):
        return []
    return [f"{indent}{question}: {answer}" for question, answer in answers.items()]


def render_list(
    records: Optional[List[Dict[str, Any]]],
    render: Callable[[Dict[str, Any]], str],
    *,
    found: str,
    empty: str,
) -> str:
    """
    'Found N x(s):' header followed by records separated by '---',
    or the ``empty`` text when there is nothing to show.
    """
    if not records:
        return empty
    body = RECORD_SEPARATOR.join(render(r) for r in records)
    return f"Found {len(records)} {found}:\n\n{body}"


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


__all__ = [
    "ToolResult",
    "reports_errors",
    "money",
    "yes_no",
    "ref_label",
    "ref_with_code",
    "full_name",
    "pricing_answer_lines",
    "render_list",
    "join_lines",
    "RECORD_SEPARATOR",
    "OffsetParam",
    "LimitParam",
    "SortDescParam",
]
