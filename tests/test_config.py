from __future__ import annotations

import pytest
from pydantic import ValidationError

from seal_bridge.config import DEFAULT_SEAL_API_BASE, Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SEAL_MERCHANT_TOKEN", "SEAL_TOKEN", "BRIDGE_BEARER", "PORT", "SEAL_API_BASE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.port == 3000
    assert settings.seal_api_base == DEFAULT_SEAL_API_BASE
    assert settings.seal_token_configured is False
    assert settings.seal_token_value() is None
    assert settings.bridge_bearer_value() is None


def test_reads_environment(clean_env):
    clean_env.setenv("SEAL_MERCHANT_TOKEN", "tok")
    clean_env.setenv("BRIDGE_BEARER", "secret")
    clean_env.setenv("PORT", "8081")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.seal_token_value() == "tok"
    assert settings.bridge_bearer_value() == "secret"
    assert settings.port == 8081
    assert settings.log_level == "DEBUG"


def test_accepts_legacy_seal_token_name(clean_env):
    clean_env.setenv("SEAL_TOKEN", "legacy")

    assert Settings(_env_file=None).seal_token_value() == "legacy"


def test_blank_token_counts_as_unset(clean_env):
    clean_env.setenv("SEAL_MERCHANT_TOKEN", "   ")

    assert Settings(_env_file=None).seal_token_configured is False


def test_secrets_are_masked_in_repr(clean_env):
    clean_env.setenv("SEAL_MERCHANT_TOKEN", "very-secret-token")

    assert "very-secret-token" not in repr(Settings(_env_file=None))


def test_api_base_trailing_slash_is_dropped(clean_env):
    clean_env.setenv("SEAL_API_BASE", "https://seal.example.test/api/")

    assert Settings(_env_file=None).seal_api_base == "https://seal.example.test/api"


@pytest.mark.parametrize("name,value", [("SEAL_API_BASE", "ftp://seal"), ("PORT", "0"), ("LOG_LEVEL", "LOUD")])
def test_rejects_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
