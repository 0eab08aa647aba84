import io
import random
import time
from datetime import datetime, timezone

from rich.console import Console

from httptop import Event

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

TIMESTAMP = "10/Oct/2023:13:55:36 -0700"


def fake_timestamp(rng=random):
    """A random but well formed access log timestamp."""
    return "%02d/%s/%04d:%02d:%02d:%02d %+05d" % (
        rng.randint(1, 28),
        rng.choice(MONTHS),
        rng.randint(1970, 2030),
        rng.randint(0, 23),
        rng.randint(0, 59),
        rng.randint(0, 59),
        rng.randint(-12, 12) * 100,
    )


def make_line(resource="/api/v1/users", status=200, size="2326", method="GET",
              host="127.0.0.1", timestamp=TIMESTAMP, extended=False,
              referer="http://example.com/", user_agent="Mozilla/5.0 (X11; Linux)"):
    line = f'{host} - frank [{timestamp}] "{method} {resource} HTTP/1.1" {status} {size}'
    if extended:
        line += f' "{referer}" "{user_agent}"'
    return line


def wait_for(predicate, timeout=5.0, interval=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class RecordingConsole(Console):
    def __init__(self):
        super().__init__(file=io.StringIO(), width=200, color_system=None, highlight=False)

    @property
    def lines(self):
        return [line for line in self.file.getvalue().splitlines() if line]


def event(section, size=100, is_error=False, status=200):
    return Event(
        section=section,
        host="10.0.0.1",
        timestamp=datetime(2023, 10, 10, 13, 55, 36, tzinfo=timezone.utc),
        method="GET",
        resource=section + "/index.html",
        version="HTTP/1.1",
        bytes=size,
        status=404 if is_error else status,
        referer="",
        user_agent="",
        is_error=is_error,
    )
