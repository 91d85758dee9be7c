"""
Helpers for SodiumHQ list endpoints.

List endpoints answer with an envelope:
    {"data": [...], "totalCount": int, "offset": int, "limit": int, "hasMore": bool}
Callers only ever see the ``data`` list; one page is fetched per call.
"""

from typing import Any, Dict, List

from .errors import SodiumParseError


def page_items(payload: Any) -> List[Dict[str, Any]]:
    """
    Extract the record list from a paginated envelope.
    Raises SodiumParseError if the expected structure is missing or malformed.
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise SodiumParseError(
            f"Expected paginated envelope, got {type(payload).__name__}"
        )

    data = payload.get("data")
    if data is None:
        raise SodiumParseError("Expected paginated envelope with a 'data' list.")
    if not isinstance(data, list):
        raise SodiumParseError("Expected envelope 'data' to be a list.")
    return data


__all__ = ["page_items"]
