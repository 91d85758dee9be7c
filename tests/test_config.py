import pytest
from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.config import DEFAULT_BASE_URL, SodiumConfig, load_env_config
from sodium_mcp.core.errors import (
    MissingApiKeyError,
    MissingTenantError,
    SodiumConfigError,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "SODIUM_API_URL",
        "SODIUM_API_KEY",
        "SODIUM_TENANT",
        "SODIUM_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_tenant_fails_before_any_request(clean_env):
    clean_env.setenv("SODIUM_API_KEY", "key")

    with pytest.raises(MissingTenantError) as exc:
        SodiumClient.from_env(use_dotenv=False)

    assert "SODIUM_TENANT" in str(exc.value)


def test_missing_api_key(clean_env):
    clean_env.setenv("SODIUM_TENANT", "acme")

    with pytest.raises(MissingApiKeyError) as exc:
        SodiumConfig.from_env(use_dotenv=False)

    assert "SODIUM_API_KEY" in str(exc.value)
    assert isinstance(exc.value, SodiumConfigError)
    assert isinstance(exc.value, ValueError)


def test_defaults_applied(clean_env):
    clean_env.setenv("SODIUM_API_KEY", " key ")
    clean_env.setenv("SODIUM_TENANT", "acme")

    cfg = SodiumConfig.from_env(use_dotenv=False)

    assert cfg.base_url == DEFAULT_BASE_URL == "https://api.sodiumhq.com"
    assert cfg.api_key == "key"
    assert cfg.timeout_seconds == 30.0


def test_overrides_from_env(clean_env):
    clean_env.setenv("SODIUM_API_URL", "https://staging.sodium.test/")
    clean_env.setenv("SODIUM_API_KEY", "key")
    clean_env.setenv("SODIUM_TENANT", "acme")
    clean_env.setenv("SODIUM_TIMEOUT_SECONDS", "5")

    cfg = SodiumConfig.from_env(use_dotenv=False)
    client = SodiumClient(cfg)

    assert cfg.timeout_seconds == 5.0
    assert client.base_url == "https://staging.sodium.test"
    assert client.tenant == "acme"


def test_non_positive_timeout_rejected(clean_env):
    clean_env.setenv("SODIUM_API_KEY", "key")
    clean_env.setenv("SODIUM_TENANT", "acme")
    clean_env.setenv("SODIUM_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValueError):
        SodiumConfig.from_env(use_dotenv=False)


def test_load_env_config_blank_url_uses_default(clean_env):
    clean_env.setenv("SODIUM_API_URL", "   ")

    base_url, api_key, tenant = load_env_config(use_dotenv=False)

    assert base_url == DEFAULT_BASE_URL
    assert api_key == ""
    assert tenant == ""


def test_client_from_env_can_skip_dotenv(clean_env):
    def fake_load_dotenv():
        clean_env.setenv("SODIUM_TENANT", "from-dotenv")

    clean_env.setattr("sodium_mcp.core.config.load_dotenv", fake_load_dotenv)
    clean_env.setenv("SODIUM_API_KEY", "key")

    with pytest.raises(MissingTenantError):
        SodiumClient.from_env(use_dotenv=False)

    client = SodiumClient.from_env()
    assert client.tenant == "from-dotenv"
