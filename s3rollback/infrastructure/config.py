"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Provides typed access to all s3rollback settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- Command-line flags are applied on top by the CLI, not here
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

from s3rollback.application.orchestration.fan_out import DEFAULT_CONCURRENCY

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "s3rollback.json"


@dataclass(frozen=True)
class S3Config:
    """Storage backend connection settings."""
    region: str = ""
    profile: str = ""
    endpoint_url: str = ""


@dataclass(frozen=True)
class RollbackSettings:
    """Rollback pipeline settings."""
    concurrency: int = DEFAULT_CONCURRENCY
    include_delete_markers: bool = False
    abort_on_fetch_errors: bool = False

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")


@dataclass(frozen=True)
class TelemetryConfig:
    """OpenTelemetry configuration."""
    endpoint: str = ""
    insecure: bool = False


@dataclass(frozen=True)
class RollbackConfig:
    """Root configuration for the s3rollback application."""
    s3: S3Config = field(default_factory=S3Config)
    rollback: RollbackSettings = field(default_factory=RollbackSettings)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    log_level: str = "WARNING"


_TOP_LEVEL_KEYS = {"log_level"}


def _env_override(data: dict, prefix: str = "S3ROLLBACK") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern S3ROLLBACK_SECTION_KEY.
    For example: S3ROLLBACK_ROLLBACK_CONCURRENCY=64, S3ROLLBACK_S3_REGION=eu-west-1.
    Top-level keys use S3ROLLBACK_KEY, e.g. S3ROLLBACK_LOG_LEVEL=INFO.
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        if name in _TOP_LEVEL_KEYS:
            data[name] = value
            continue
        parts = name.split("_", 1)
        if len(parts) == 2:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object", path)
        return {}
    return data


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    # Convert string numbers to int/bool
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str):
            if f.type == "int":
                filtered[f.name] = int(filtered[f.name])
            elif f.type == "bool":
                filtered[f.name] = filtered[f.name].lower() in ("true", "1", "yes")

    return cls(**filtered)


def _section(data: dict, name: str) -> dict:
    """Return a config section, or an empty one if it is not a JSON object."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Config section '%s' must be a JSON object, using defaults", name)
        return {}
    return section


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "S3ROLLBACK",
) -> RollbackConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (S3ROLLBACK_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to s3rollback.json in CWD.
        env_prefix: Environment variable prefix. Defaults to S3ROLLBACK.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return RollbackConfig(
        s3=_build_sub_config(S3Config, _section(data, "s3")),
        rollback=_build_sub_config(RollbackSettings, _section(data, "rollback")),
        telemetry=_build_sub_config(TelemetryConfig, _section(data, "telemetry")),
        log_level=data.get("log_level", "WARNING"),
    )
