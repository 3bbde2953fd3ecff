"""
Common Utilities

Shared modules used across the package:
- config.py - Settings dataclass and loader
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
"""

from .config import (
    S2ASettings,
    GCE_METADATA_HOST_ENV_VAR,
    load_settings,
)
from .exceptions import (
    S2AError,
    ConfigError,
    MetadataError,
    MtlsConfigParseError,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
)

__all__ = [
    # Config
    "S2ASettings",
    "GCE_METADATA_HOST_ENV_VAR",
    "load_settings",
    # Exceptions
    "S2AError",
    "ConfigError",
    "MetadataError",
    "MtlsConfigParseError",
    # Logging
    "setup_logging",
    "get_service_logger",
]
