"""HTTP Top - Traffic statistics"""

import logging
import queue
import threading
from datetime import datetime
from typing import Dict, Optional

from .models import Event, Section, WindowSummary

log = logging.getLogger(__name__)


class Aggregator:
    """Owns all traffic counters.

    Events are folded in by ``record`` (normally from ``run``, the only
    consumer of the event queue). The reporter and the traffic monitor go
    through ``take_window`` and ``take_traffic_hits``, which read and reset
    under the same lock so no event is lost between the two.
    """

    def __init__(self, events: Optional[queue.Queue] = None):
        self.events = events
        self._lock = threading.Lock()
        self._sections: Dict[str, Section] = {}
        self._busiest: Optional[str] = None
        self._hits = 0
        self._bytes = 0
        self._errors = 0
        self._traffic_hits = 0
        self._thread: Optional[threading.Thread] = None

    def record(self, event: Event):
        with self._lock:
            section = self._sections.get(event.section)
            if section is None:
                section = Section(event.section)
                self._sections[event.section] = section

            section.hits += 1
            section.bytes += event.bytes
            if event.is_error:
                section.errors += 1

            self._hits += 1
            self._bytes += event.bytes
            if event.is_error:
                self._errors += 1
            self._traffic_hits += 1

            # the incumbent keeps the title on a tie
            busiest = self._sections.get(self._busiest) if self._busiest else None
            if busiest is None or section.hits > busiest.hits:
                self._busiest = section.name

    def take_window(self, now: Optional[datetime] = None) -> WindowSummary:
        """Snapshot the reporting window, then zero it."""
        with self._lock:
            busiest = self._sections.get(self._busiest) if self._busiest else None
            summary = WindowSummary(
                time=now or datetime.now().astimezone(),
                hits=self._hits,
                bytes=self._bytes,
                errors=self._errors,
                busiest=busiest.name if busiest else None,
                busiest_hits=busiest.hits if busiest else 0,
            )

            self._busiest = None
            self._hits = 0
            self._bytes = 0
            self._errors = 0
            for section in self._sections.values():
                section.reset()

        return summary

    def take_traffic_hits(self) -> int:
        """Hits since the previous call; the counter restarts at zero."""
        with self._lock:
            hits = self._traffic_hits
            self._traffic_hits = 0
        return hits

    def section(self, name: str) -> Optional[Section]:
        with self._lock:
            section = self._sections.get(name)
            return Section(section.name, section.hits, section.bytes, section.errors) if section else None

    @property
    def sections(self) -> Dict[str, Section]:
        with self._lock:
            return {
                name: Section(s.name, s.hits, s.bytes, s.errors)
                for name, s in self._sections.items()
            }

    @property
    def busiest(self) -> Optional[str]:
        return self._busiest

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def bytes(self) -> int:
        return self._bytes

    @property
    def errors(self) -> int:
        return self._errors

    @property
    def traffic_hits(self) -> int:
        return self._traffic_hits

    def run(self):
        while True:
            self.record(self.events.get())

    def start(self) -> threading.Thread:
        log.debug("Aggregator consuming events")
        self._thread = threading.Thread(target=self.run, name="httptop-aggregator", daemon=True)
        self._thread.start()
        return self._thread
