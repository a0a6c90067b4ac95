"""Configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from delimgen.exceptions import ConfigurationError
from delimgen.models import RunConfig

_ENV_TO_CONFIG: dict[str, str] = {
    "DELIMGEN_TARGET_DIR": "target_dir",
    "DELIMGEN_FILE_COUNT": "file_count",
    "DELIMGEN_EMPTY_PERCENT": "empty_percent",
    "DELIMGEN_HEADER_ONLY_PERCENT": "header_only_percent",
    "DELIMGEN_MAX_ROW_COUNT": "max_row_count",
    "DELIMGEN_SEPARATOR": "separator",
    "DELIMGEN_DETAILED_LOGGING": "logging_enabled",
    "DELIMGEN_LOG_DIR": "log_dir",
    "DELIMGEN_SEED": "seed",
}

_BOOL_FIELDS = {"logging_enabled"}
_INT_FIELDS = {"file_count", "empty_percent", "header_only_percent", "max_row_count", "seed"}


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    dotenv_path: Path | None = None,
) -> RunConfig:
    """Load config from defaults, yaml file, .env, env, and explicit overrides."""
    payload: dict[str, Any] = {}
    dotenv_to_load = dotenv_path if dotenv_path is not None else Path(".env")
    load_dotenv(dotenv_path=dotenv_to_load, override=False)

    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(f"Config file does not exist: {config_path}")
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError("Config file must contain a top-level mapping.")
        payload.update(raw)

    for env_key, config_key in _ENV_TO_CONFIG.items():
        env_value = os.getenv(env_key)
        if env_value is None or env_value == "":
            continue
        payload[config_key] = _coerce_env_value(config_key, env_value)

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                payload[key] = value

    try:
        config = RunConfig(**payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {_summarize(exc)}") from exc
    return config


def ensure_directories(config: RunConfig) -> None:
    """Create the target directory, and the log directory when logging is on."""
    targets = [config.target_dir]
    if config.logging_enabled:
        targets.append(config.resolved_log_dir)
    for path in targets:
        if path.exists() and not path.is_dir():
            raise ConfigurationError(f"Path exists and is not a directory: {path}")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Cannot create directory {path}: {exc}") from exc


def dump_config(config: RunConfig) -> str:
    """Render the effective configuration as YAML."""
    payload = config.model_dump(mode="json")
    payload["log_dir"] = str(config.resolved_log_dir)
    return yaml.safe_dump(payload, sort_keys=False)


def _coerce_env_value(config_key: str, env_value: str) -> Any:
    if config_key in _BOOL_FIELDS:
        normalized = env_value.strip().lower()
        return normalized in {"1", "true", "yes", "on"}
    if config_key in _INT_FIELDS:
        try:
            return int(env_value)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment value for {config_key} must be an integer: {env_value!r}"
            ) from exc
    return env_value


def _summarize(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "config"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
