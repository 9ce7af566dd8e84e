from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

SERVICE_TYPES = ("hair", "spa")


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class PortalLoginCredentials:
    username: str
    password: str = field(repr=False)
    service_type: str | None = None
