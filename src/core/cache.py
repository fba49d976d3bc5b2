"""
Small injectable caches for settings and access tokens.

Both take a `clock` callable (seconds, default time.monotonic/time.time) so
callers and tests control expiry without patching globals.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


@dataclass
class TTLCache:
    """Key/value cache where every entry expires `ttl_seconds` after it was set."""

    ttl_seconds: float
    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, tuple[float, Any]] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any):
        self._entries[key] = (self.clock() + self.ttl_seconds, value)

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            value = loader()
            self.set(key, value)
        return value

    def clear(self):
        self._entries.clear()


@dataclass
class AccessTokenCache:
    """Holds one bearer token and its absolute expiry (epoch seconds)."""

    refresh_buffer_seconds: float = 300
    clock: Callable[[], float] = time.time
    token: str | None = None
    expires_at: float = 0

    def get(self) -> str | None:
        """Return the token if it is valid for longer than the refresh buffer."""
        if self.token and self.expires_at > self.clock() + self.refresh_buffer_seconds:
            return self.token
        return None

    def store(self, token: str, expires_in: float):
        self.token = token
        self.expires_at = self.clock() + expires_in

    def clear(self):
        self.token = None
        self.expires_at = 0
