import time
from typing import Any, Callable

DEFAULT_TTL_SECONDS = 60.0

_MISSING = object()


class TtlCache:
    """Small key/value cache with an injectable clock. Owned by whoever reads through it."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str, default=None):
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            return default
        stored_at, value = entry
        if self.clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value) -> None:
        self._entries[key] = (self.clock(), value)

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
