"""
mTLS Configuration Cache

Holds the S2A address obtained from the metadata server together
with the time it stops being trusted.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from ..common.config import DEFAULT_TTL_S

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MtlsConfig:
    """
    Cached mTLS auto-configuration.

    An empty address is never valid, so a failed lookup is retried
    on the next request instead of being cached for a full TTL.
    """

    def __init__(
        self,
        s2a_address: str,
        expiry: datetime,
        ttl_s: int = DEFAULT_TTL_S,
        clock: Clock | None = None,
    ):
        self.s2a_address = s2a_address
        self.expiry = expiry
        self.ttl = timedelta(seconds=ttl_s)
        self._clock = clock or utc_now

    @classmethod
    def create_null(cls, ttl_s: int = DEFAULT_TTL_S, clock: Clock | None = None) -> "MtlsConfig":
        """Config with no address, already expired"""
        clock = clock or utc_now
        return cls("", clock(), ttl_s=ttl_s, clock=clock)

    def is_valid(self) -> bool:
        if not self.s2a_address:
            return False
        return self._clock() < self.expiry

    def reset(self, s2a_address: str) -> None:
        """Store a freshly fetched address and restart the expiry window"""
        # Computed first so an overflow leaves the cache untouched
        expiry = self._clock() + self.ttl
        self.s2a_address = s2a_address
        self.expiry = expiry

    def invalidate(self) -> None:
        self.expiry = self._clock()

    def to_dict(self) -> dict[str, Any]:
        return {
            "s2a_address": self.s2a_address,
            "expiry": self.expiry.isoformat(),
            "valid": self.is_valid(),
        }

    def __repr__(self) -> str:
        return f"MtlsConfig(s2a_address={self.s2a_address!r}, expiry={self.expiry.isoformat()})"
