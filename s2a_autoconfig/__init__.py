"""
s2a-autoconfig

Discovers the S2A (Secure Session Agent) address from the metadata
server's mTLS auto-configuration endpoint.
"""

from .common import (
    S2ASettings,
    load_settings,
    S2AError,
    ConfigError,
    MetadataError,
    MtlsConfigParseError,
)
from .mtls import (
    S2A,
    AsyncS2A,
    MtlsConfig,
    DEFAULT_METADATA_SERVER_URL,
    MTLS_CONFIG_ENDPOINT,
)

__version__ = "0.1.0"

__all__ = [
    "S2A",
    "AsyncS2A",
    "MtlsConfig",
    "S2ASettings",
    "load_settings",
    "S2AError",
    "ConfigError",
    "MetadataError",
    "MtlsConfigParseError",
    "DEFAULT_METADATA_SERVER_URL",
    "MTLS_CONFIG_ENDPOINT",
]
