from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional


class SodiumClientError(Exception):
    """Base error for client failures."""


class SodiumHTTPError(SodiumClientError):
    """Non-2xx response normalised to a status code and a message."""

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.method = method
        self.url = url


class SodiumParseError(SodiumClientError):
    pass


class SodiumConfigError(ValueError):
    """Raised when required configuration is missing."""


class MissingApiKeyError(SodiumConfigError):
    pass


class MissingTenantError(SodiumConfigError):
    pass


def ensure_error_message(value: Any) -> str:
    """
    Turn anything raised (or rejected) into a single message string.
    - exceptions: their ``message`` attribute when it is a string, else str(exc)
    - strings: returned as-is
    - mappings with a string "message": that value
    - other mappings / sequences: JSON text
    - everything else: str(value)
    """
    if isinstance(value, BaseException):
        message = getattr(value, "message", None)
        if isinstance(message, str):
            return message
        return str(value) or type(value).__name__

    if isinstance(value, str):
        return value

    if isinstance(value, Mapping):
        message = value.get("message")
        if isinstance(message, str):
            return message

    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return str(value)

    return str(value)


__all__ = [
    "SodiumClientError",
    "SodiumHTTPError",
    "SodiumParseError",
    "SodiumConfigError",
    "MissingApiKeyError",
    "MissingTenantError",
    "ensure_error_message",
]
