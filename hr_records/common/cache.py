"""In-process query cache with request de-duplication and invalidation.

Keys are tuples whose first element names the key family, e.g.
``("job_history", "E001", None)``.  Mutations invalidate whole families:
cached entries are dropped and loads already in flight are not stored,
so the next read goes back to the backend.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Hashable, Optional, TypeVar

from fastapi import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = tuple[Hashable, ...]


@dataclass
class _Entry:
    value: Any
    fetched_at: float


@dataclass
class _Pending:
    future: asyncio.Future = field(
        default_factory=lambda: asyncio.get_running_loop().create_future(),
    )
    invalidated: bool = False


class QueryCache:
    """Caches list/aggregate query results by key.

    At most ``max_entries`` results are kept; the least recently read
    entry is evicted first.
    """

    def __init__(
        self,
        stale_after: float = 60.0,
        *,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_after = stale_after
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[QueryKey, _Entry] = OrderedDict()
        self._in_flight: dict[QueryKey, _Pending] = {}

    def __len__(self) -> int:
        return len(self._entries)

    # ── Reads ───────────────────────────────────────────────────────

    async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for *key*, loading it when missing or stale.

        At most one load per key is in flight; concurrent callers await the
        same future.  A load invalidated while in flight still answers its
        own waiters but is not cached, and later callers start a new load.
        Failed loads are not cached.
        """
        entry = self._entries.get(key)
        if entry is not None:
            if not self._is_stale(entry):
                self._entries.move_to_end(key)
                return entry.value
            del self._entries[key]

        pending = self._in_flight.get(key)
        if pending is not None and not pending.invalidated:
            return await asyncio.shield(pending.future)

        pending = _Pending()
        self._in_flight[key] = pending
        try:
            value = await loader()
        except asyncio.CancelledError:
            pending.future.cancel()
            raise
        except Exception as exc:
            pending.future.set_exception(exc)
            # Mark retrieved so a lone caller does not log "never retrieved".
            pending.future.exception()
            raise
        else:
            if not pending.invalidated:
                self._store(key, value)
            pending.future.set_result(value)
            return value
        finally:
            if self._in_flight.get(key) is pending:
                del self._in_flight[key]

    def peek(self, key: QueryKey) -> Optional[Any]:
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or self._is_stale(entry)

    # ── Invalidation ────────────────────────────────────────────────

    def invalidate(self, *families: Hashable) -> int:
        """Drop every entry of the given key families; returns how many."""
        wanted = set(families)
        dropped = [key for key in self._entries if key and key[0] in wanted]
        for key in dropped:
            del self._entries[key]
        for key, pending in self._in_flight.items():
            if key and key[0] in wanted:
                pending.invalidated = True
        logger.debug("Invalidated %d cached queries in %s", len(dropped), sorted(map(str, wanted)))
        return len(dropped)

    def clear(self) -> None:
        self._entries.clear()
        for pending in self._in_flight.values():
            pending.invalidated = True

    def _store(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = _Entry(value=value, fetched_at=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def _is_stale(self, entry: _Entry) -> bool:
        return (self._clock() - entry.fetched_at) > self.stale_after


def get_cache(request: Request) -> QueryCache:
    """FastAPI dependency: the app's query cache."""
    return request.app.state.cache
