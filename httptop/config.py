"""HTTP Top - Configuration and logging setup"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .patterns import (
    DEFAULT_COALESCE,
    DEFAULT_LOG_FILE,
    DEFAULT_RATE,
    DEFAULT_TRIGGER,
    DEFAULT_WINDOW,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_DURATION_UNITS = {
    'h': 3600.0,
    'm': 60.0,
    's': 1.0,
    'ms': 0.001,
    'us': 0.000001,
}
_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ms|us|h|m|s)')


@dataclass
class Config:
    log_file: str = DEFAULT_LOG_FILE
    error_log: Optional[str] = None
    trigger: int = DEFAULT_TRIGGER
    rate: float = DEFAULT_RATE
    window: float = DEFAULT_WINDOW
    coalesce: float = DEFAULT_COALESCE
    json_output: bool = False
    verbose: bool = False
    cpuprofile: Optional[str] = None


def parse_duration(text: str) -> float:
    """Seconds from "10", "2.5", "500ms", "2m" or "1h2m3s"."""
    text = text.strip()
    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos == 0 or pos != len(text):
            raise ValueError(f"invalid duration {text!r}")

    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"duration must be positive: {text!r}")
    return seconds


def setup_logging(error_log: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Route httptop diagnostics to stderr, or to ``error_log`` when given.

    Raises OSError if the log file cannot be opened.
    """
    logger = logging.getLogger("httptop")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if error_log:
        handler = logging.FileHandler(error_log, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logger.addHandler(handler)
    return logger
