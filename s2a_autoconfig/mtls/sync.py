"""
mTLS Auto-Config Sync

Queries the metadata server's mTLS auto-configuration endpoint and
extracts the S2A address.

Every failure (transport error, error status, empty or malformed body)
is logged and reported as an empty address.
"""

import os
from typing import Any, Callable

import httpx

from ..common.config import DEFAULT_TIMEOUT_S, GCE_METADATA_HOST_ENV_VAR
from ..common.exceptions import MetadataError, MtlsConfigParseError
from ..common.logging_setup import get_service_logger

logger = get_service_logger("mtls.sync")

DEFAULT_METADATA_SERVER_URL = "http://metadata.google.internal"
MTLS_CONFIG_ENDPOINT = "/instance/platform-security/auto-mtls-configuration"

METADATA_FLAVOR = "Metadata-Flavor"
GOOGLE = "Google"

ClientFactory = Callable[[], httpx.Client]
AsyncClientFactory = Callable[[], httpx.AsyncClient]


def get_mtls_endpoint(metadata_host: str | None = None) -> str:
    """
    Resolve the mTLS auto-config URL.

    GCE_METADATA_HOST wins over the configured host; with neither set
    the well-known metadata server is used.
    """
    host = os.environ.get(GCE_METADATA_HOST_ENV_VAR) or metadata_host
    if host:
        return f"http://{host}{MTLS_CONFIG_ENDPOINT}"
    return DEFAULT_METADATA_SERVER_URL + MTLS_CONFIG_ENDPOINT


def parse_s2a_address(response: httpx.Response, url: str) -> str:
    """
    Extract the S2A address from an auto-config response.

    Raises:
        MetadataError: On a non-success status
        MtlsConfigParseError: If the body is not an object with a string "s2a"
    """
    if not response.is_success:
        raise MetadataError(
            f"Unexpected status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    # No body means no configuration
    if not response.content:
        return ""

    try:
        data: Any = response.json()
    except ValueError as e:
        raise MtlsConfigParseError(url=url, detail=str(e)) from e

    if not isinstance(data, dict):
        raise MtlsConfigParseError(url=url, detail="expected a JSON object")

    s2a_address = data.get("s2a")
    if not isinstance(s2a_address, str):
        raise MtlsConfigParseError(url=url, detail="missing or non-string 's2a'")

    return s2a_address


def _log_failure(url: str, error: Exception) -> None:
    logger.warning(
        f"mTLS auto-config lookup failed: {error}",
        extra={
            "url": url,
            "status_code": getattr(error, "status_code", None),
        },
    )


class MtlsConfigSync:
    """
    Fetches the S2A address over a reusable ``httpx.Client``.

    The client comes from ``client_factory`` when one is set, otherwise
    a default client with the configured timeout is created on first use.
    """

    def __init__(
        self,
        metadata_host: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client_factory: ClientFactory | None = None,
    ):
        self.metadata_host = metadata_host
        self.timeout_s = timeout_s
        self._client_factory = client_factory
        self._client: httpx.Client | None = None

    def set_client_factory(self, factory: ClientFactory | None) -> None:
        """Swap the HTTP client source; the current client is discarded"""
        self.close()
        self._client_factory = factory

    def _get_client(self) -> httpx.Client:
        """Get or create reusable HTTP client"""
        if self._client is None or self._client.is_closed:
            if self._client_factory is not None:
                self._client = self._client_factory()
            else:
                self._client = httpx.Client(timeout=self.timeout_s)
        return self._client

    def close(self) -> None:
        """Close HTTP client"""
        if self._client and not self._client.is_closed:
            self._client.close()
        self._client = None

    @property
    def endpoint(self) -> str:
        return get_mtls_endpoint(self.metadata_host)

    def fetch_s2a_address(self) -> str:
        """
        Query the auto-config endpoint.

        Returns:
            The S2A address, or "" on any error
        """
        url = self.endpoint
        try:
            client = self._get_client()
            response = client.get(
                url,
                headers={METADATA_FLAVOR: GOOGLE},
                timeout=self.timeout_s,
            )
            s2a_address = parse_s2a_address(response, url)
        except (httpx.HTTPError, httpx.InvalidURL, MetadataError) as e:
            _log_failure(url, e)
            return ""

        logger.debug(f"S2A address from {url}: {s2a_address!r}", extra={"url": url})
        return s2a_address


class AsyncMtlsConfigSync:
    """Async twin of MtlsConfigSync built on ``httpx.AsyncClient``"""

    def __init__(
        self,
        metadata_host: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client_factory: AsyncClientFactory | None = None,
    ):
        self.metadata_host = metadata_host
        self.timeout_s = timeout_s
        self._client_factory = client_factory
        self._client: httpx.AsyncClient | None = None

    async def set_client_factory(self, factory: AsyncClientFactory | None) -> None:
        await self.close()
        self._client_factory = factory

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client"""
        if self._client is None or self._client.is_closed:
            if self._client_factory is not None:
                self._client = self._client_factory()
            else:
                self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    @property
    def endpoint(self) -> str:
        return get_mtls_endpoint(self.metadata_host)

    async def fetch_s2a_address(self) -> str:
        url = self.endpoint
        try:
            client = await self._get_client()
            response = await client.get(
                url,
                headers={METADATA_FLAVOR: GOOGLE},
                timeout=self.timeout_s,
            )
            s2a_address = parse_s2a_address(response, url)
        except (httpx.HTTPError, httpx.InvalidURL, MetadataError) as e:
            _log_failure(url, e)
            return ""

        logger.debug(f"S2A address from {url}: {s2a_address!r}", extra={"url": url})
        return s2a_address
