from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic

from app.modules.portal.domain.models import SyncStatus
from app.shared.infrastructure.settings import get_settings


@dataclass(slots=True)
class _Entry:
    status: SyncStatus
    expires_at: float


class SyncStatusRegistry:
    """
    Process-local sync status per user.

    Entries expire after ``ttl_seconds`` and then read as ``idle``. Not shared
    across worker processes.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[int, _Entry] = {}
        self._lock = threading.Lock()

    def set_status(self, user_id: int, status: SyncStatus | str) -> SyncStatus:
        status = SyncStatus(status)
        now = self._clock()
        with self._lock:
            self._drop_expired(now)
            self._entries[user_id] = _Entry(status=status, expires_at=now + self._ttl)
        return status

    def get_status(self, user_id: int) -> SyncStatus:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return SyncStatus.IDLE
            if entry.expires_at <= now:
                del self._entries[user_id]
                return SyncStatus.IDLE
            return entry.status

    def clear_status(self, user_id: int) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._drop_expired(now)

    def _drop_expired(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


sync_status_registry = SyncStatusRegistry(ttl_seconds=get_settings().sync_status_ttl_seconds)
