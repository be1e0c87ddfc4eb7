"""Single-slot sentiment cache with stale-while-revalidate and single-flight refresh.

One snapshot is shared by every API reader. Callers never trigger more than
one upstream refresh at a time, never wait longer than the configured bound
for someone else's refresh, and never see a refresh failure: they get the
previous snapshot, or a neutral default when there has never been one.

All state changes happen on the event loop thread. The in-flight flag is
checked and set without an intervening ``await``, which is what serializes
refreshes; no lock is needed.
"""

import asyncio
import time
from dataclasses import dataclass, asdict
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from .core.config import CacheConfig, get_config
from .core.logger import get_logger
from .core.waiting import wait_for
from .models import SentimentSnapshot, default_snapshot

logger = get_logger(__name__)

FetchSnapshot = Callable[[], Awaitable[SentimentSnapshot]]


@dataclass
class CacheState:
    """Mutable cache slot, owned by exactly one SentimentCache."""
    snapshot: Optional[SentimentSnapshot] = None
    last_refresh_at: float = 0.0       # clock() reading of the last stored snapshot
    refresh_in_flight: bool = False


@dataclass
class CacheStats:
    refreshes: int = 0
    refresh_failures: int = 0
    background_refreshes: int = 0
    wait_timeouts: int = 0


class SentimentCache:
    """Serves the freshest available snapshot to any number of concurrent callers."""

    def __init__(
        self,
        fetch_snapshot: FetchSnapshot,
        config: Optional[CacheConfig] = None,
        state: Optional[CacheState] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            fetch_snapshot: Coroutine function producing a fresh snapshot
                (normally ``SnapshotAggregator.fetch_fresh_snapshot``)
            config: Freshness window, stale window and wait bounds
            state: Slot to operate on; a new empty one by default
            clock: Seconds source used for snapshot ages
        """
        self._fetch_snapshot = fetch_snapshot
        self.config = config or get_config()
        self.state = state or CacheState()
        self.stats = CacheStats()
        self._clock = clock
        self._background: Set[asyncio.Task] = set()

    def age(self) -> Optional[float]:
        """Seconds since the current snapshot was stored, None without one."""
        if self.state.snapshot is None:
            return None
        return self._clock() - self.state.last_refresh_at

    async def get_snapshot(self) -> SentimentSnapshot:
        """
        Return the best snapshot available right now.

        In priority order: a fresh snapshot as-is; a stale-but-usable one while
        a background refresh starts; any existing snapshot while a refresh is
        already running (or, with nothing cached yet, the result of waiting on
        that refresh); otherwise a foreground refresh.
        """
        state = self.state
        snapshot = state.snapshot
        age = self.age()

        if snapshot is not None and age < self.config.ttl_seconds:
            return snapshot

        if (
            snapshot is not None
            and age < self.config.stale_seconds
            and not state.refresh_in_flight
        ):
            self.refresh_in_background()
            return snapshot

        if state.refresh_in_flight:
            if snapshot is not None:
                return snapshot
            await self._wait_for_refresh()
            return state.snapshot or default_snapshot()

        return await self._refresh_foreground()

    def refresh_in_background(self) -> bool:
        """
        Start a fire-and-forget refresh unless one is already running.

        Returns:
            True if a refresh task was started
        """
        if self.state.refresh_in_flight:
            return False

        self.state.refresh_in_flight = True
        self.stats.background_refreshes += 1
        task = asyncio.get_running_loop().create_task(self._background_refresh())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return True

    async def _background_refresh(self) -> None:
        try:
            await self._run_refresh()
            logger.info("cache_updated_in_background")
        except Exception as e:
            logger.error("background_refresh_failed", error=str(e), exc_info=True)

    async def _refresh_foreground(self) -> SentimentSnapshot:
        self.state.refresh_in_flight = True
        try:
            return await self._run_refresh()
        except Exception as e:
            logger.error("cache_refresh_failed", error=str(e), exc_info=True)
            if self.state.snapshot is not None:
                logger.warning("serving_stale_snapshot", age_seconds=self.age())
                return self.state.snapshot
            logger.warning("serving_default_snapshot")
            return default_snapshot()

    async def _run_refresh(self) -> SentimentSnapshot:
        """Fetch and store a snapshot; the caller has already set the in-flight flag."""
        try:
            self.stats.refreshes += 1
            snapshot = await self._fetch_snapshot()
            self._store(snapshot)
            # Newest stored snapshot, which is not the fetched one if that was older
            return self.state.snapshot
        except Exception:
            self.stats.refresh_failures += 1
            raise
        finally:
            self.state.refresh_in_flight = False

    def _store(self, snapshot: SentimentSnapshot) -> None:
        current = self.state.snapshot
        if current is not None and snapshot.generated_at < current.generated_at:
            logger.warning("older_snapshot_discarded", generated_at=snapshot.generated_at.isoformat())
            return
        self.state.snapshot = snapshot
        self.state.last_refresh_at = self._clock()
        logger.debug("cache_refreshed", generated_at=snapshot.generated_at.isoformat())

    async def _wait_for_refresh(self) -> bool:
        """Bounded wait for the running refresh to finish."""
        finished = await wait_for(
            lambda: not self.state.refresh_in_flight,
            timeout=self.config.wait_timeout,
            interval=self.config.poll_interval,
        )
        if not finished:
            self.stats.wait_timeouts += 1
            logger.warning(
                "cache_wait_timeout",
                timeout=self.config.wait_timeout,
                wait_timeouts=self.stats.wait_timeouts,
            )
        return finished

    def diagnostics(self) -> Dict[str, Any]:
        """Cache health for the /health endpoint."""
        age = self.age()
        return {
            "has_data": self.state.snapshot is not None,
            "age_seconds": int(age) if age is not None else None,
            "ttl_seconds": self.config.ttl_seconds,
            "refresh_in_flight": self.state.refresh_in_flight,
            "stats": asdict(self.stats),
        }

    async def aclose(self) -> None:
        """Cancel background refreshes that are still running."""
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            # A task cancelled before its first step never reaches the finally
            # in _run_refresh, so the flag it was started with is cleared here
            self.state.refresh_in_flight = False
