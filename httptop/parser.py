"""HTTP Top - Access log line parser"""

import logging
import queue
import threading
from datetime import datetime
from typing import Optional, Tuple

from .models import Event
from .patterns import (
    BYTES_PATTERN,
    HTTP_ERROR_STATUSES,
    HTTP_METHODS,
    HTTP_STATUSES,
    LOG_PATTERNS,
    STATUS_PATTERN,
    TIMESTAMP_FORMAT,
    TIMESTAMP_PATTERN,
)

log = logging.getLogger(__name__)


class ParseError(ValueError):
    """A log line field could not be parsed"""


def parse_timestamp(timestamp: str) -> datetime:
    if not TIMESTAMP_PATTERN.match(timestamp):
        raise ParseError(f"expected DD/Mon/YYYY:HH:MM:SS +ZZZZ, got {timestamp!r}")
    try:
        return datetime.strptime(timestamp, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise ParseError(str(e)) from e


def parse_request(request: str) -> Tuple[str, str, str]:
    components = request.split()
    if len(components) != 3:
        raise ParseError(f"Three tokens required (have {len(components)}): {components}")

    method, resource, version = components
    if method not in HTTP_METHODS:
        raise ParseError(f"Unsupported HTTP method {method}")

    return method, resource, version


def parse_section(resource: str) -> str:
    # "/" on its own becomes the root section rather than ""
    return "/" + resource.strip("/").split("/")[0]


def parse_status(status: str) -> Tuple[int, bool]:
    if not STATUS_PATTERN.fullmatch(status):
        raise ParseError(f"Status is not an integer: {status!r}")
    code = int(status)

    if code not in HTTP_STATUSES:
        raise ParseError(f"Unknown HTTP status code {code}")

    return code, code in HTTP_ERROR_STATUSES


def parse_bytes(count: str) -> int:
    if count == "-":
        return 0
    if not BYTES_PATTERN.fullmatch(count):
        raise ParseError(f"Byte count is not an integer: {count!r}")
    return int(count)


class LineParser:
    """Turns raw lines from the tailer into Events for the aggregator.

    One instance consumes ``lines`` and feeds ``events``; both are bounded
    queues, so a slow consumer blocks this worker on ``put``. Lines that do
    not parse are logged and dropped, they are never retried.
    """

    def __init__(self, lines: queue.Queue, events: queue.Queue):
        self.lines = lines
        self.events = events
        self.parsed = 0
        self.dropped = 0
        self._thread: Optional[threading.Thread] = None

    def parse_line(self, line: str) -> Optional[Event]:
        line = line.strip()
        if not line:
            return None

        groups = None
        for pattern in LOG_PATTERNS.values():
            match = pattern.match(line)
            if match:
                groups = match.groupdict()
                break

        if groups is None:
            self._drop("Log line malformed [%s]", line)
            return None

        try:
            timestamp = parse_timestamp(groups['timestamp'])
        except ParseError as e:
            self._drop("Invalid timestamp [%s] (%s)", groups['timestamp'], e)
            return None

        try:
            method, resource, version = parse_request(groups['request'])
        except ParseError as e:
            self._drop("Invalid request {%s} [%s] (%s)", line, groups['request'], e)
            return None

        try:
            status, is_error = parse_status(groups['status'])
        except ParseError as e:
            self._drop("Invalid status [%s] (%s)", groups['status'], e)
            return None

        try:
            byte_count = parse_bytes(groups['bytes'])
        except ParseError as e:
            self._drop("Invalid byte count [%s] (%s)", groups['bytes'], e)
            return None

        self.parsed += 1
        return Event(
            section=parse_section(resource),
            host=groups['host'],
            timestamp=timestamp,
            method=method,
            resource=resource,
            version=version,
            bytes=byte_count,
            status=status,
            referer=groups.get('referer') or '',
            user_agent=groups.get('user_agent') or '',
            is_error=is_error,
        )

    def _drop(self, msg, *args):
        self.dropped += 1
        log.warning(msg, *args)

    def run(self):
        while True:
            event = self.parse_line(self.lines.get())
            if event is not None:
                self.events.put(event)

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="httptop-parser", daemon=True)
        self._thread.start()
        return self._thread
