"""Configuration loading for the body binding service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_VERSION = "3.0.0"
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    api_version: str = DEFAULT_API_VERSION
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    require_json_content_type: bool = True


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        name = name.strip()
        if name != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_setting(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    return raw_value


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_log_level(raw_value: str | None, *, key: str) -> str:
    if raw_value is None or not raw_value.strip():
        return DEFAULT_LOG_LEVEL
    normalized = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(normalized), int):
        raise ConfigError(f"{key} must be a logging level name.")
    return normalized


def load_config() -> AppConfig:
    """Load configuration from the environment, falling back to .env."""
    dotenv_path = Path.cwd() / ".env"

    api_version_key = "BODYFILTER_API_VERSION"
    api_version = (_read_setting(dotenv_path, api_version_key) or "").strip()

    log_level_key = "BODYFILTER_LOG_LEVEL"
    log_level = _read_log_level(
        _read_setting(dotenv_path, log_level_key), key=log_level_key
    )

    log_json_key = "BODYFILTER_LOG_JSON"
    log_json = _read_bool(
        _read_setting(dotenv_path, log_json_key), default=False, key=log_json_key
    )

    content_type_key = "BODYFILTER_REQUIRE_JSON_CONTENT_TYPE"
    require_json_content_type = _read_bool(
        _read_setting(dotenv_path, content_type_key),
        default=True,
        key=content_type_key,
    )

    return AppConfig(
        api_version=api_version or DEFAULT_API_VERSION,
        log_level=log_level,
        log_json=log_json,
        require_json_content_type=require_json_content_type,
    )
