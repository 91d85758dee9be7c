from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from .errors import MissingApiKeyError, MissingTenantError

DEFAULT_BASE_URL = "https://api.sodiumhq.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str, str]:
    """Load SodiumHQ base URL, API key and tenant from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = os.getenv("SODIUM_API_URL", "").strip() or DEFAULT_BASE_URL
    api_key = os.getenv("SODIUM_API_KEY", "").strip()
    tenant = os.getenv("SODIUM_TENANT", "").strip()
    return base_url, api_key, tenant


def _read_timeout_env() -> float:
    raw = os.getenv("SODIUM_TIMEOUT_SECONDS")
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT_SECONDS
    value = float(raw)
    if value <= 0:
        raise ValueError("SODIUM_TIMEOUT_SECONDS must be greater than zero")
    return value


@dataclass(frozen=True)
class SodiumConfig:
    """Connection settings shared by every tool call for the process lifetime."""

    api_key: str
    tenant: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.api_key:
            raise MissingApiKeyError(
                "SODIUM_API_KEY environment variable is required"
            )
        if not self.tenant:
            raise MissingTenantError("SODIUM_TENANT environment variable is required")

    @classmethod
    def from_env(cls, *, use_dotenv: bool = True) -> "SodiumConfig":
        base_url, api_key, tenant = load_env_config(use_dotenv=use_dotenv)
        return cls(
            api_key=api_key,
            tenant=tenant,
            base_url=base_url,
            timeout_seconds=_read_timeout_env(),
        )


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "SodiumConfig",
    "load_env_config",
]
