"""
mTLS Auto-Configuration

Responsibilities:
- Fetch the mTLS auto-config from the metadata server
- Cache the S2A address until it expires
- Serialize refreshes across threads or coroutines
"""

from .config import MtlsConfig
from .service import S2A, AsyncS2A
from .sync import (
    AsyncMtlsConfigSync,
    MtlsConfigSync,
    DEFAULT_METADATA_SERVER_URL,
    MTLS_CONFIG_ENDPOINT,
    get_mtls_endpoint,
)

__all__ = [
    "MtlsConfig",
    "S2A",
    "AsyncS2A",
    "MtlsConfigSync",
    "AsyncMtlsConfigSync",
    "DEFAULT_METADATA_SERVER_URL",
    "MTLS_CONFIG_ENDPOINT",
    "get_mtls_endpoint",
]
