"""HTTP Top - CPU profiling of every pipeline thread"""

import logging

import yappi

log = logging.getLogger(__name__)


class Profiler:
    """Profiles the calling thread and every thread started after ``start``.

    Stats are written in pstats format, readable with ``python -m pstats``.
    """

    def __init__(self, path: str):
        self.path = path

    def start(self):
        """Raises OSError if ``path`` cannot be written."""
        with open(self.path, "wb"):
            pass
        yappi.set_clock_type("cpu")
        yappi.start()
        log.debug("CPU profiling to %s", self.path)

    def stop(self) -> "yappi.YFuncStats":
        """Stop profiling and save the stats. Raises OSError if saving fails."""
        yappi.stop()
        try:
            stats = yappi.get_func_stats()
            stats.save(self.path, type="pstat")
        finally:
            yappi.clear_stats()
        return stats
