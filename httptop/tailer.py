"""HTTP Top - Follow a growing log file"""

import logging
import os
import queue
import threading
from typing import List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .patterns import CHUNK_SIZE, DEFAULT_COALESCE

log = logging.getLogger(__name__)


class LineBuffer:
    """Reassembles lines from arbitrary chunks of bytes.

    A line is only returned once its newline has been seen; whatever follows
    the last newline is kept until the next ``feed``.
    """

    def __init__(self):
        self._buf = bytearray()

    def feed(self, data: bytes) -> List[str]:
        self._buf.extend(data)
        *complete, rest = self._buf.split(b"\n")
        self._buf = bytearray(rest)
        return [line.decode("utf-8", errors="replace") for line in complete]

    @property
    def pending(self) -> str:
        return self._buf.decode("utf-8", errors="replace")


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, path: str, changed: threading.Event):
        super().__init__()
        self.path = path
        self.changed = changed

    def on_modified(self, event):
        if os.path.abspath(os.fsdecode(event.src_path)) == self.path:
            self.changed.set()


class FileTailer:
    """Pushes every line appended to ``path`` onto ``lines``.

    Only content written after ``open()`` is read. ``watching`` is set once
    the file has been opened and positioned at its end. Symlinks are resolved
    when the tailer is created, so change notifications come from the
    directory holding the real file.
    """

    def __init__(self, path: str, lines: queue.Queue,
                 coalesce: float = DEFAULT_COALESCE, chunk_size: int = CHUNK_SIZE):
        self.path = path
        self.target = os.path.realpath(path)
        self.lines = lines
        self.coalesce = coalesce
        self.chunk_size = chunk_size
        self.watching = threading.Event()
        self._buffer = LineBuffer()
        self._changed = threading.Event()
        self._stopped = threading.Event()
        self._file = None
        self._observer = None
        self._thread: Optional[threading.Thread] = None

    def open(self):
        """Open the log and seek to its end. Raises OSError on failure."""
        f = open(self.path, "rb", buffering=0)
        try:
            f.seek(0, os.SEEK_END)
        except OSError:
            f.close()
            raise
        self._file = f
        log.info("Watching %s from offset %d", self.path, f.tell())
        self.watching.set()

    def read_available(self) -> int:
        """Read everything up to EOF, queue complete lines, return how many."""
        count = 0
        while True:
            try:
                data = self._file.read(self.chunk_size)
            except OSError as e:
                log.warning("Error reading from file %s: %s", self.path, e)
                return count

            if not data:
                return count

            for line in self._buffer.feed(data):
                self.lines.put(line)
                count += 1

    def run(self):
        while not self._stopped.is_set():
            self._changed.wait()
            # let a burst of writes land before reading
            if self._stopped.wait(self.coalesce):
                break
            self._changed.clear()
            self.read_available()

    def start(self) -> threading.Thread:
        if self._file is None:
            self.open()

        self._observer = Observer()
        self._observer.schedule(
            _ChangeHandler(self.target, self._changed),
            os.path.dirname(self.target),
            recursive=False,
        )
        self._observer.start()

        # pick up anything written between open() and the observer starting
        self._changed.set()

        self._thread = threading.Thread(target=self.run, name="httptop-tailer", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self):
        self._stopped.set()
        self._changed.set()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
        if self._thread is not None:
            self._thread.join()
        if self._file is not None:
            self._file.close()
