"""
In-process cache of rendered dashboard routes.

Snapshots are kept per client (the authenticated user) and per route. Each
(client, route) pair also carries a revision number; invalidating a route
drops its snapshot and moves its revision forward, and the listing endpoint
publishes the revision as its ETag so browsers refetch.

The cache holds at most `max_entries` (client, route) pairs and evicts the
least recently used one past that. Revisions come from a single counter
shared by all pairs, and a pair with no entry reports the counter's current
value. An evicted pair therefore never reports a revision lower than one it
already published, so an old ETag cannot match again after eviction.
"""

import threading
from collections import OrderedDict
from typing import Any, List, Optional, Protocol, Tuple

from invoicing.config import DEFAULT_CACHE_ENTRIES, settings
from invoicing.utils.logging import get_logger

logger = get_logger(__name__)

_Key = Tuple[str, str]


class CacheInvalidator(Protocol):
    """Cache-invalidation collaborator used by the mutation handlers."""

    def invalidate(self, route: str) -> None: ...


class RouteCache:
    """Thread-safe, size-bounded store of route snapshots and revisions."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._lock = threading.Lock()
        # key -> [revision, snapshot]
        self._entries: "OrderedDict[_Key, List[Any]]" = OrderedDict()
        self._clock = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _touch(self, key: _Key) -> Optional[List[Any]]:
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
        return entry

    def _store(self, key: _Key, entry: List[Any]) -> None:
        self._entries[key] = entry
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted {evicted[1]} for client {evicted[0]}")

    def revision(self, client_id: str, route: str) -> int:
        with self._lock:
            entry = self._touch((client_id, route))
            return entry[0] if entry is not None else self._clock

    def get(self, client_id: str, route: str) -> Optional[Any]:
        with self._lock:
            entry = self._touch((client_id, route))
            return entry[1] if entry is not None else None

    def put(self, client_id: str, route: str, snapshot: Any, revision: int) -> bool:
        """
        Store a snapshot rendered at `revision`.

        Returns False (and stores nothing) if the route was invalidated while
        the snapshot was being rendered.
        """
        key = (client_id, route)
        with self._lock:
            entry = self._touch(key)
            current = entry[0] if entry is not None else self._clock
            if current != revision:
                return False
            self._store(key, [revision, snapshot])
            return True

    def invalidate(self, client_id: str, route: str) -> None:
        with self._lock:
            self._clock += 1
            revision = self._clock
            self._store((client_id, route), [revision, None])
        logger.debug(f"Invalidated {route} for client {client_id} (revision={revision})")

    def bind(self, client_id: str) -> "ClientRouteCache":
        return ClientRouteCache(self, client_id)

    def clear(self) -> None:
        """Drop every entry. Revisions keep counting from where they were."""
        with self._lock:
            self._entries.clear()


class ClientRouteCache:
    """RouteCache view for one client. Satisfies CacheInvalidator."""

    def __init__(self, cache: RouteCache, client_id: str):
        self._cache = cache
        self.client_id = client_id

    def revision(self, route: str) -> int:
        return self._cache.revision(self.client_id, route)

    def get(self, route: str) -> Optional[Any]:
        return self._cache.get(self.client_id, route)

    def put(self, route: str, snapshot: Any, revision: int) -> bool:
        return self._cache.put(self.client_id, route, snapshot, revision)

    def invalidate(self, route: str) -> None:
        self._cache.invalidate(self.client_id, route)


# Process-wide cache shared by all requests
route_cache = RouteCache(max_entries=settings.ROUTE_CACHE_MAX_ENTRIES)
