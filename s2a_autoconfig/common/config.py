"""
Settings

Runtime settings for the S2A address lookup. Values come from an
optional YAML file (``s2a:`` section) and are overridden by
environment variables.

GCE_METADATA_HOST is not folded into the settings: the endpoint
resolver reads it on every fetch.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

# Environment variable naming the metadata server host (host[:port])
GCE_METADATA_HOST_ENV_VAR = "GCE_METADATA_HOST"

DEFAULT_TIMEOUT_S = 10.0
# Cached address lifetime (1 hour)
DEFAULT_TTL_S = 3600
# One week
MAX_TTL_S = 7 * 24 * 3600

_ENV_OVERRIDES = {
    "timeout_s": "S2A_AUTOCONFIG_TIMEOUT_S",
    "ttl_s": "S2A_AUTOCONFIG_TTL_S",
    "log_level": "S2A_AUTOCONFIG_LOG_LEVEL",
    "log_format": "S2A_AUTOCONFIG_LOG_FORMAT",
}


@dataclass
class S2ASettings:
    """S2A lookup settings, range-checked on construction"""
    metadata_host: str | None = None  # None = default metadata server
    timeout_s: float = DEFAULT_TIMEOUT_S
    ttl_s: int = DEFAULT_TTL_S
    log_level: str = "INFO"
    log_format: str = "json"  # json, text

    def __post_init__(self):
        if self.timeout_s <= 0:
            raise ConfigError(f"timeout_s must be positive, got {self.timeout_s}")
        if not 0 < self.ttl_s <= MAX_TTL_S:
            raise ConfigError(f"ttl_s must be between 1 and {MAX_TTL_S}, got {self.ttl_s}")
        if self.log_format not in ("json", "text"):
            raise ConfigError(f"log_format must be 'json' or 'text', got {self.log_format}")


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load the ``s2a`` section of a YAML settings file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}")

    section = data.get("s2a") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 's2a' to be a mapping in {path}")
    return dict(section)


def load_settings(path: str | Path | None = None) -> S2ASettings:
    """
    Build settings from YAML file and environment.

    Args:
        path: Optional YAML file; a missing file means defaults

    Returns:
        Validated S2ASettings

    Raises:
        ConfigError: If the file cannot be parsed or a value is out of range
    """
    data: dict[str, Any] = _load_yaml(Path(path)) if path else {}

    for key, env_var in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data[key] = value

    try:
        timeout_s = float(data.get("timeout_s", DEFAULT_TIMEOUT_S))
        ttl_s = int(data.get("ttl_s", DEFAULT_TTL_S))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    return S2ASettings(
        metadata_host=data.get("metadata_host") or None,
        timeout_s=timeout_s,
        ttl_s=ttl_s,
        log_level=str(data.get("log_level", "INFO")).upper(),
        log_format=str(data.get("log_format", "json")).lower(),
    )
