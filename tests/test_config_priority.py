from __future__ import annotations

import pytest

from httpclients.config import load_settings
from httpclients.errors import ConfigError


def write_config(tmp_path) -> str:
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'base_url: "http://cfg.local"',
            "timeout_seconds: 5",
            'accept_language: "fr-FR"',
            "default_headers:",
            '  X-Client: "cfg"',
            '  X-Tenant: "cfg-tenant"',
        ]),
        encoding="utf-8",
    )
    return str(cfg)


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    cfg = write_config(tmp_path)

    # ENV overrides config
    monkeypatch.setenv("HTTPCLIENTS_BASE_URL", "http://env.local")
    monkeypatch.setenv("HTTPCLIENTS_TIMEOUT_SECONDS", "10")
    monkeypatch.setenv("HTTPCLIENTS_DEFAULT_HEADERS", "X-Client: env; X-Env: 1")

    # CLI overrides env
    loaded = load_settings(cfg, {"base_url": "http://cli.local", "timeout_seconds": None})

    assert loaded.settings.base_url == "http://cli.local"
    assert loaded.settings.timeout_seconds == 10.0
    assert loaded.settings.accept_language == "fr-FR"
    assert loaded.settings.default_headers == {"X-Client": "env", "X-Tenant": "cfg-tenant", "X-Env": "1"}
    assert loaded.sources_used == ["config", "env", "cli"]


def test_defaults_without_sources(monkeypatch):
    for name in (
        "BASE_URL",
        "TIMEOUT_SECONDS",
        "TLS_SKIP_VERIFY",
        "CA_FILE",
        "ACCEPT_LANGUAGE",
        "DEFAULT_HEADERS",
        "LOG_LEVEL",
        "LOG_DIR",
    ):
        monkeypatch.delenv(f"HTTPCLIENTS_{name}", raising=False)

    loaded = load_settings(None, {"base_url": None})

    assert loaded.settings.base_url is None
    assert loaded.settings.timeout_seconds == 30.0
    assert loaded.settings.tls_skip_verify is False
    assert loaded.settings.log_level == "INFO"
    assert loaded.sources_used == []


def test_invalid_env_boolean_raises_config_error(monkeypatch):
    monkeypatch.setenv("HTTPCLIENTS_TLS_SKIP_VERIFY", "maybe")

    with pytest.raises(ConfigError) as exc:
        load_settings(None, {})

    assert exc.value.code == "CONFIG_ERROR"


def test_missing_config_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(str(tmp_path / "absent.yml"), {})
