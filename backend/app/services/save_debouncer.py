"""
Debounce coordinator for chat history saves.

Suppresses a second write for the same key arriving within the debounce
window. This guards a single process only; it gives no exclusivity across
several server instances.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Hashable
from enum import Enum
from typing import Optional


class DebounceDecision(str, Enum):
    ACCEPT = "accept"
    DEBOUNCED = "debounced"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SaveDebouncer:
    """Per-key window check over the last accepted write time (milliseconds)."""

    def __init__(self, window_ms: int = 1000, retention_factor: int = 5):
        self._window_ms = window_ms
        self._retention_ms = window_ms * retention_factor
        self._last_accepted: dict[Hashable, float] = {}
        self._lock = threading.Lock()

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def should_persist(self, key: Hashable, now_ms: Optional[float] = None) -> DebounceDecision:
        now = _monotonic_ms() if now_ms is None else now_ms
        with self._lock:
            last = self._last_accepted.get(key)
            if last is not None and now - last < self._window_ms:
                return DebounceDecision.DEBOUNCED
            self._last_accepted[key] = now
            self._prune(now)
            return DebounceDecision.ACCEPT

    def forget(self, key: Hashable) -> None:
        with self._lock:
            self._last_accepted.pop(key, None)

    def _prune(self, now: float) -> None:
        stale = [k for k, at in self._last_accepted.items() if now - at > self._retention_ms]
        for k in stale:
            del self._last_accepted[k]

    def __len__(self) -> int:
        return len(self._last_accepted)
