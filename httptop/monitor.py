"""HTTP Top - Timer driven reporting and alerting"""

import logging
import threading
from datetime import datetime
from typing import Optional

from .aggregator import Aggregator
from .models import TrafficState, WindowSummary
from .output import Printer
from .patterns import DEFAULT_RATE, DEFAULT_TRIGGER, DEFAULT_WINDOW

log = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


class _Ticker:
    """Calls ``tick`` every ``interval`` seconds on its own thread."""

    name = "httptop-ticker"

    def __init__(self, interval: float):
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def tick(self, now: Optional[datetime] = None):
        raise NotImplementedError

    def run(self):
        while not self._stopped.wait(self.interval):
            self.tick()

    def start(self) -> threading.Thread:
        log.debug("%s ticking every %ss", self.name, self.interval)
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        return self._thread

    def stop(self):
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()


class PeriodicReporter(_Ticker):
    """Prints the reporting window and starts a new one."""

    name = "httptop-reporter"

    def __init__(self, aggregator: Aggregator, printer: Printer, interval: float = DEFAULT_RATE):
        super().__init__(interval)
        self.aggregator = aggregator
        self.printer = printer

    def tick(self, now: Optional[datetime] = None) -> WindowSummary:
        summary = self.aggregator.take_window(now or _now())
        self.printer.summary(summary)
        return summary


class TrafficMonitor(_Ticker):
    """Two state high traffic alert.

    Each tick compares the hits seen since the previous tick against
    ``threshold``. Only transitions are printed: a sustained burst alerts
    once, and recovery is announced once.
    """

    name = "httptop-traffic"

    def __init__(self, aggregator: Aggregator, printer: Printer,
                 threshold: int = DEFAULT_TRIGGER, interval: float = DEFAULT_WINDOW):
        super().__init__(interval)
        self.aggregator = aggregator
        self.printer = printer
        self.threshold = threshold
        self.state = TrafficState.NORMAL
        self.last_transition: Optional[datetime] = None

    def tick(self, now: Optional[datetime] = None) -> TrafficState:
        now = now or _now()
        hits = self.aggregator.take_traffic_hits()
        high = hits > self.threshold

        if high and self.state is TrafficState.NORMAL:
            self.state = TrafficState.HIGH_TRAFFIC
            self.last_transition = now
            log.info("High traffic: %d hits (threshold %d)", hits, self.threshold)
            self.printer.alert(hits, now)
        elif not high and self.state is TrafficState.HIGH_TRAFFIC:
            self.state = TrafficState.NORMAL
            self.last_transition = now
            log.info("Traffic back to normal: %d hits", hits)
            self.printer.recovered(now)

        return self.state
