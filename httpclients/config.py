from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os
import yaml

from httpclients.errors import ConfigError

ENV_PREFIX = "HTTPCLIENTS_"


@dataclass(frozen=True)
class Settings:
    # Transport
    base_url: str | None = None
    timeout_seconds: float = 30.0
    tls_skip_verify: bool = False
    ca_file: str | None = None

    # Headers
    accept_language: str | None = None
    default_headers: dict[str, str] = field(default_factory=dict)

    # Logging
    log_dir: str = "./logs"
    log_level: str = "INFO"


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", details={"path": str(path)})
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(ENV_PREFIX + name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _parse_float(name: str, v: str | None) -> float | None:
    if v is None:
        return None
    try:
        return float(v)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: {v}") from exc


def _parse_bool(name: str, v: str | None) -> bool | None:
    if v is None:
        return None
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ConfigError(f"Invalid boolean for {name}: {v}")


def _parse_headers(name: str, v: str | None) -> dict[str, str] | None:
    """Формат env: 'Name: value; Other: value'."""
    if v is None:
        return None
    headers: dict[str, str] = {}
    for item in v.split(";"):
        if not item.strip():
            continue
        if ":" not in item:
            raise ConfigError(f"Invalid header for {name}: {item.strip()}")
        key, value = item.split(":", 1)
        headers[key.strip()] = value.strip()
    return headers


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    default_headers объединяются по ключам в том же порядке.
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {
        "base_url": _env_get("BASE_URL"),
        "timeout_seconds": _parse_float("timeout_seconds", _env_get("TIMEOUT_SECONDS")),
        "tls_skip_verify": _parse_bool("tls_skip_verify", _env_get("TLS_SKIP_VERIFY")),
        "ca_file": _env_get("CA_FILE"),
        "accept_language": _env_get("ACCEPT_LANGUAGE"),
        "default_headers": _parse_headers("default_headers", _env_get("DEFAULT_HEADERS")),
        "log_dir": _env_get("LOG_DIR"),
        "log_level": _env_get("LOG_LEVEL"),
    }
    if any(v is not None for v in env.values()):
        sources.append("env")

    cfg_headers = cfg.get("default_headers") or {}
    if not isinstance(cfg_headers, dict):
        raise ConfigError("default_headers in config must be a mapping")

    # merge config -> env -> cli
    merged = {
        "base_url": cfg.get("base_url", defaults.base_url),
        "timeout_seconds": cfg.get("timeout_seconds", defaults.timeout_seconds),
        "tls_skip_verify": cfg.get("tls_skip_verify", defaults.tls_skip_verify),
        "ca_file": cfg.get("ca_file", defaults.ca_file),
        "accept_language": cfg.get("accept_language", defaults.accept_language),
        "default_headers": {str(k): str(v) for k, v in cfg_headers.items()},
        "log_dir": cfg.get("log_dir", defaults.log_dir),
        "log_level": cfg.get("log_level", defaults.log_level),
    }

    for k, v in env.items():
        if v is None:
            continue
        if k == "default_headers":
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        if k == "default_headers":
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v

    settings = Settings(
        base_url=merged["base_url"],
        timeout_seconds=float(merged["timeout_seconds"]),
        tls_skip_verify=bool(merged["tls_skip_verify"]),
        ca_file=merged["ca_file"],
        accept_language=merged["accept_language"],
        default_headers=merged["default_headers"],
        log_dir=merged["log_dir"],
        log_level=merged["log_level"],
    )

    return LoadedSettings(settings=settings, sources_used=sources)
