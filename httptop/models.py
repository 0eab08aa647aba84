"""HTTP Top - Data models"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Event:
    """One parsed access log line"""
    section: str
    host: str
    timestamp: datetime
    method: str
    resource: str
    version: str
    bytes: int
    status: int
    referer: str
    user_agent: str
    is_error: bool


@dataclass
class Section:
    """Traffic for one section during the current reporting window"""
    name: str
    hits: int = 0
    bytes: int = 0
    errors: int = 0

    def reset(self):
        self.hits = 0
        self.bytes = 0
        self.errors = 0


@dataclass(frozen=True)
class WindowSummary:
    """Snapshot of a reporting window taken right before it was reset"""
    time: datetime
    hits: int
    bytes: int
    errors: int
    busiest: Optional[str]
    busiest_hits: int

    @property
    def kilobytes(self) -> int:
        return self.bytes // 1024

    @property
    def idle(self) -> bool:
        return self.busiest is None


class TrafficState(Enum):
    NORMAL = 'normal'
    HIGH_TRAFFIC = 'high_traffic'
