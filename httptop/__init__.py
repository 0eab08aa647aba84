"""HTTP Top package"""

from .patterns import VERSION, HTTP_METHODS, HTTP_STATUSES, LOG_PATTERNS
from .models import Event, Section, TrafficState, WindowSummary
from .aggregator import Aggregator
from .config import Config, parse_duration, setup_logging
from .monitor import PeriodicReporter, TrafficMonitor
from .output import Printer
from .parser import LineParser, ParseError
from .pipeline import Pipeline
from .tailer import FileTailer, LineBuffer

__all__ = [
    'VERSION', 'Aggregator', 'Config', 'Event', 'FileTailer', 'LineBuffer',
    'LineParser', 'ParseError', 'PeriodicReporter', 'Pipeline', 'Printer',
    'Section', 'TrafficMonitor', 'TrafficState', 'WindowSummary',
    'parse_duration', 'setup_logging',
]
