"""
S2A Address Service

Hands out the S2A address from the mTLS auto-configuration and
refreshes it from the metadata server once the cached copy expires.

Usage:
    with S2A() as s2a:
        address = s2a.get_s2a_address()  # "" when unavailable
"""

import asyncio
import threading

from ..common.config import S2ASettings, load_settings
from ..common.logging_setup import get_service_logger

from .config import Clock, MtlsConfig
from .sync import (
    AsyncClientFactory,
    AsyncMtlsConfigSync,
    ClientFactory,
    MtlsConfigSync,
)

logger = get_service_logger("mtls.service")


class S2A:
    """
    Thread-safe S2A address lookup.

    Only one thread at a time checks the cache and, when stale,
    refreshes it. Concurrent callers wait and then reuse the result.
    """

    def __init__(
        self,
        settings: S2ASettings | None = None,
        client_factory: ClientFactory | None = None,
        clock: Clock | None = None,
    ):
        self.settings = settings or load_settings()
        self.sync = MtlsConfigSync(
            metadata_host=self.settings.metadata_host,
            timeout_s=self.settings.timeout_s,
            client_factory=client_factory,
        )
        self.config = MtlsConfig.create_null(ttl_s=self.settings.ttl_s, clock=clock)
        self._lock = threading.Lock()

    def set_client_factory(self, factory: ClientFactory | None) -> None:
        with self._lock:
            self.sync.set_client_factory(factory)

    def get_s2a_address(self) -> str:
        """Return the S2A address, refreshing the config if it is expired"""
        with self._lock:
            if not self.config.is_valid():
                address = self.sync.fetch_s2a_address()
                self.config.reset(address)
                if address:
                    logger.info(
                        f"S2A address refreshed: {address}",
                        extra={"expiry": self.config.expiry.isoformat()},
                    )
            else:
                logger.debug("Using cached S2A address")
            return self.config.s2a_address

    def invalidate(self) -> None:
        """Force the next lookup to query the metadata server"""
        with self._lock:
            self.config.invalidate()

    def close(self) -> None:
        with self._lock:
            self.sync.close()

    def __enter__(self) -> "S2A":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class AsyncS2A:
    """
    Coroutine-safe S2A address lookup.

    Concurrent awaiters of an expired cache share a single fetch.
    """

    def __init__(
        self,
        settings: S2ASettings | None = None,
        client_factory: AsyncClientFactory | None = None,
        clock: Clock | None = None,
    ):
        self.settings = settings or load_settings()
        self.sync = AsyncMtlsConfigSync(
            metadata_host=self.settings.metadata_host,
            timeout_s=self.settings.timeout_s,
            client_factory=client_factory,
        )
        self.config = MtlsConfig.create_null(ttl_s=self.settings.ttl_s, clock=clock)
        self._lock = asyncio.Lock()

    async def set_client_factory(self, factory: AsyncClientFactory | None) -> None:
        async with self._lock:
            await self.sync.set_client_factory(factory)

    async def get_s2a_address(self) -> str:
        async with self._lock:
            if not self.config.is_valid():
                address = await self.sync.fetch_s2a_address()
                self.config.reset(address)
                if address:
                    logger.info(
                        f"S2A address refreshed: {address}",
                        extra={"expiry": self.config.expiry.isoformat()},
                    )
            return self.config.s2a_address

    async def invalidate(self) -> None:
        async with self._lock:
            self.config.invalidate()

    async def close(self) -> None:
        async with self._lock:
            await self.sync.close()

    async def __aenter__(self) -> "AsyncS2A":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
