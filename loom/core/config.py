"""Sentiment cache configuration."""

from dataclasses import dataclass

from ..config import settings


@dataclass
class CacheConfig:
    # Freshness window (seconds)
    ttl_seconds: float = 30.0
    # Snapshots younger than ttl * stale_multiplier are served while revalidating
    stale_multiplier: float = 2.0
    # Longest a caller waits on someone else's refresh when there is no data yet
    wait_timeout: float = 5.0
    # How often a waiting caller re-checks the in-flight flag
    poll_interval: float = 0.1

    def __post_init__(self):
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.stale_multiplier < 1.0:
            raise ValueError("stale_multiplier must be >= 1")
        if self.wait_timeout < 0:
            raise ValueError("wait_timeout must be >= 0")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

    @property
    def stale_seconds(self) -> float:
        return self.ttl_seconds * self.stale_multiplier

    @classmethod
    def from_settings(cls) -> "CacheConfig":
        return cls(
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            stale_multiplier=settings.CACHE_STALE_MULTIPLIER,
            wait_timeout=settings.CACHE_WAIT_TIMEOUT,
            poll_interval=settings.CACHE_POLL_INTERVAL,
        )


# Global singleton
_config: CacheConfig | None = None


def get_config() -> CacheConfig:
    global _config
    if _config is None:
        _config = CacheConfig.from_settings()
    return _config
