"""Configuration loading: TOML file, environment variables and explicit overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tracecontext.context.tracestate import TraceStateMember, is_valid_key, is_valid_value
from tracecontext.errors import ConfigError
from tracecontext.sampling import SamplingBehavior

CONFIG_FILE_NAME = "tracecontext.toml"

# Environment variable -> (section, field)
ENV_VARS = {
    "TRACECONTEXT_VENDOR_KEY": ("propagation", "vendor_key"),
    "TRACECONTEXT_VENDOR_VALUE": ("propagation", "vendor_value"),
    "TRACECONTEXT_SAMPLING": ("propagation", "sampling"),
    "TRACECONTEXT_DEBUG": ("logging", "debug"),
    "TRACECONTEXT_LOG_LEVEL": ("logging", "level"),
}


class PropagationConfig(BaseModel):
    """How outbound trace context is produced."""

    model_config = ConfigDict(extra="forbid")

    vendor_key: Optional[str] = None
    vendor_value: str = ""
    sampling: SamplingBehavior = SamplingBehavior.PASS_THROUGH

    @field_validator("vendor_key")
    @classmethod
    def _check_key(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_key(value):
            raise ValueError(f"invalid tracestate key: {value!r}")
        return value

    @field_validator("vendor_value")
    @classmethod
    def _check_value(cls, value: str) -> str:
        # Empty means "use the parent id"
        if value and not is_valid_value(value):
            raise ValueError(f"invalid tracestate value: {value!r}")
        return value

    def member(self) -> Optional[TraceStateMember]:
        if not self.vendor_key:
            return None
        return TraceStateMember(key=self.vendor_key, value=self.vendor_value)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    debug: bool = False
    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value!r}")
        return level


class TraceContextConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    propagation: PropagationConfig = Field(default_factory=PropagationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file.

    Returns an empty dict if the file does not exist.

    Raises:
        ConfigError: the file is not valid TOML
    """
    file_path = Path(path)
    if not file_path.is_file():
        return {}
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}", details={"error": exc}) from exc


def find_config_file() -> Optional[str]:
    """Look for ./tracecontext.toml, then ~/.tracecontext.toml."""
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / f".{CONFIG_FILE_NAME}",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def _env_config() -> Dict[str, Dict[str, str]]:
    result: Dict[str, Dict[str, str]] = {}
    for name, (section, key) in ENV_VARS.items():
        value = os.environ.get(name)
        if value is not None:
            result.setdefault(section, {})[key] = value
    return result


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TraceContextConfig:
    """
    Build the configuration.

    Priority: explicit overrides > environment variables > config file > defaults.

    Raises:
        ConfigError: invalid TOML or values
    """
    if config_file is None:
        config_file = find_config_file()

    data: Dict[str, Any] = load_toml_config(config_file) if config_file else {}
    data = _merge(data, _env_config())
    data = _merge(data, overrides or {})

    try:
        return TraceContextConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError("Invalid trace context configuration", details={"errors": exc.error_count()}) from exc


def configure_logging(config: TraceContextConfig) -> None:
    """Set the level of the package logger from ``config``."""
    level = logging.DEBUG if config.logging.debug else getattr(logging, config.logging.level)
    logging.getLogger("tracecontext").setLevel(level)
