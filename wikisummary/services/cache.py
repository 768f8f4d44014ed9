"""In-memory TTL cache with single-flight deduplication.

Concurrent lookups for the same key share one computation. Successful
results are kept until their TTL elapses; failures are never stored.

Every bookkeeping step (installing the in-flight marker, promoting a
result, dropping an entry) runs between ``await`` points on the event
loop, so other tasks never observe a half-updated entry. Nothing is
locked while ``compute`` runs, so unrelated keys never wait on each other.

Note: the cache is process-local. Each uvicorn worker owns its own
instance, so with several workers the same page may be fetched once per
worker.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from wikisummary.errors import CacheClosedError, InvalidKeyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Compute = Callable[[], Union[Awaitable[T], T]]


class CacheOutcome(str, Enum):
    """How a lookup was served, for span attributes and response headers."""

    HIT = "hit"
    MISS = "miss"
    JOINED = "joined"


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    value: T
    outcome: CacheOutcome


@dataclass(frozen=True)
class _Entry(Generic[T]):
    value: T
    expires_at: float


@dataclass
class _Counters:
    hits: int = 0
    misses: int = 0
    joins: int = 0
    failures: int = 0
    evictions: int = 0


def _validate_key(key: Any) -> str:
    if not isinstance(key, str) or not key.strip():
        raise InvalidKeyError(key)
    return key


def _consume_exception(task: asyncio.Task) -> None:
    # Waiters may all have gone away; mark the exception as retrieved.
    if not task.cancelled():
        task.exception()


class SingleFlightTTLCache(Generic[T]):
    """Async TTL cache where each key is computed at most once at a time.

    Per key: absent -> pending -> ready -> absent (expiry or invalidation).
    A failed computation goes straight back to absent.

    Args:
        clock: monotonic time source used for every expiry computation and
            comparison. Tests pass a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry[T]] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self._counters = _Counters()
        self._sweeper: asyncio.Task | None = None
        self._closed = False

    async def get_or_compute(self, key: str, ttl_seconds: float, compute: Compute) -> T:
        """Return the cached value for ``key``, computing it if absent or expired."""
        result = await self.lookup(key, ttl_seconds, compute)
        return result.value

    async def lookup(self, key: str, ttl_seconds: float, compute: Compute) -> CacheResult[T]:
        """Like ``get_or_compute`` but also report whether it was a hit, miss or join.

        ``compute`` takes no arguments and returns a value or an awaitable.
        Blocking work should be wrapped with ``asyncio.to_thread``.

        Exceptions raised by ``compute`` reach every caller that joined the
        same attempt unchanged, and are not cached. Cancelling a caller only
        stops that caller's wait; the computation keeps running for the others.
        """
        _validate_key(key)
        if not ttl_seconds > 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if self._closed:
            raise CacheClosedError()

        entry = self._entries.get(key)
        if entry is not None:
            if self._clock() < entry.expires_at:
                self._counters.hits += 1
                return CacheResult(entry.value, CacheOutcome.HIT)
            del self._entries[key]
            self._counters.evictions += 1

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.get_running_loop().create_task(
                self._run(key, ttl_seconds, compute), name=f"cache-compute:{key}"
            )
            task.add_done_callback(_consume_exception)
            self._in_flight[key] = task
            self._counters.misses += 1
            outcome = CacheOutcome.MISS
            logger.debug("Cache miss for %s", key)
        else:
            self._counters.joins += 1
            outcome = CacheOutcome.JOINED

        value = await asyncio.shield(task)
        return CacheResult(value, outcome)

    async def _run(self, key: str, ttl_seconds: float, compute: Compute) -> T:
        try:
            value = compute()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            self._counters.failures += 1
            logger.warning("Cache computation for %s failed: %s", key, e)
            raise
        else:
            self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl_seconds)
        finally:
            self._release(key)
        return value

    def _release(self, key: str) -> None:
        if self._in_flight.get(key) is asyncio.current_task():
            del self._in_flight[key]

    def invalidate(self, key: str) -> bool:
        """Drop the ready entry for ``key``. Returns True if one was present.

        A computation already in flight is left alone and will store its
        result when it finishes.
        """
        _validate_key(key)
        return self._entries.pop(key, None) is not None

    def evict_expired(self) -> int:
        """Physically remove expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._counters.evictions += len(expired)
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))
        return len(expired)

    def start_sweeper(self, interval_seconds: float) -> None:
        """Start a background task that evicts expired entries periodically.

        Only reclaims memory; lookups already ignore expired entries.
        Stopped by ``aclose``.
        """
        if not interval_seconds > 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if self._closed:
            raise CacheClosedError()
        if self._sweeper is not None and not self._sweeper.done():
            raise RuntimeError("Sweeper already running")
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep(interval_seconds), name="cache-sweeper"
        )

    async def _sweep(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.evict_expired()

    async def aclose(self) -> None:
        """Tear the cache down.

        Stops the sweeper, cancels in-flight computations (their waiters
        get ``asyncio.CancelledError``) and drops every entry. Lookups made
        afterwards raise ``CacheClosedError``. Safe to call twice.
        """
        if self._closed:
            return
        self._closed = True

        tasks = list(self._in_flight.values())
        if self._sweeper is not None:
            tasks.append(self._sweeper)
            self._sweeper = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._in_flight.clear()
        self._entries.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if now < entry.expires_at)

    def stats(self) -> dict:
        return {
            "size": len(self),
            "in_flight": len(self._in_flight),
            "hits": self._counters.hits,
            "misses": self._counters.misses,
            "joins": self._counters.joins,
            "failures": self._counters.failures,
            "evictions": self._counters.evictions,
        }
