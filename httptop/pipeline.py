"""HTTP Top - Wires the tailer, parser, aggregator and timers together"""

import logging
import queue

from .aggregator import Aggregator
from .config import Config
from .monitor import PeriodicReporter, TrafficMonitor
from .output import Printer
from .parser import LineParser
from .patterns import QUEUE_SIZE
from .tailer import FileTailer

log = logging.getLogger(__name__)


class Pipeline:
    """FileTailer -> lines -> LineParser -> events -> Aggregator.

    The two queues hold at most QUEUE_SIZE items and block their producer
    when full; that is the only flow control. There is exactly one worker per
    stage so events reach the aggregator in the order lines were read.
    """

    def __init__(self, config: Config, printer: Printer = None):
        self.config = config
        self.printer = printer or Printer(json_output=config.json_output)
        self.lines: queue.Queue = queue.Queue(maxsize=QUEUE_SIZE)
        self.events: queue.Queue = queue.Queue(maxsize=QUEUE_SIZE)

        self.tailer = FileTailer(config.log_file, self.lines, coalesce=config.coalesce)
        self.parser = LineParser(self.lines, self.events)
        self.aggregator = Aggregator(self.events)
        self.reporter = PeriodicReporter(self.aggregator, self.printer, interval=config.rate)
        self.monitor = TrafficMonitor(
            self.aggregator, self.printer,
            threshold=config.trigger, interval=config.window,
        )

    def start(self):
        """Start every worker. Raises OSError if the log cannot be tailed."""
        self.tailer.open()
        self.parser.start()
        self.aggregator.start()
        self.reporter.start()
        self.monitor.start()
        self.tailer.start()
        self.tailer.watching.wait()
        log.info("Monitoring %s (trigger %d hits per %ss, report every %ss)",
                 self.config.log_file, self.config.trigger,
                 self.config.window, self.config.rate)

    def stop(self):
        self.reporter.stop()
        self.monitor.stop()
        self.tailer.stop()
