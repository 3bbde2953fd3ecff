"""Shared fixtures: clean environment, fake clock, mocked metadata server"""

from datetime import datetime, timedelta, timezone
import logging

import httpx
import pytest

ENV_VARS = (
    "GCE_METADATA_HOST",
    "S2A_AUTOCONFIG_TIMEOUT_S",
    "S2A_AUTOCONFIG_TTL_S",
    "S2A_AUTOCONFIG_LOG_LEVEL",
    "S2A_AUTOCONFIG_LOG_FORMAT",
)


class FakeClock:
    """Manually advanced UTC clock"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class MetadataServer:
    """Records requests and answers with a configurable response"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: dict | list | str | None = {"s2a": "127.0.0.1:50051"}
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.body is None:
            return httpx.Response(self.status_code)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def client_factory(self):
        return lambda: httpx.Client(transport=httpx.MockTransport(self.handler))

    def async_client_factory(self):
        return lambda: httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metadata_server():
    return MetadataServer()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() and level changes made by a test"""
    package_logger = logging.getLogger("s2a_autoconfig")
    saved = (package_logger.level, package_logger.propagate, list(package_logger.handlers))
    yield
    level, propagate, handlers = saved
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    package_logger.handlers[:] = handlers
