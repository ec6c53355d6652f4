"""JSONL trace store implementation."""

import json
import logging
import sys
import threading
from pathlib import Path
from typing import Iterator, Optional, TextIO

from mrmm.trace.schema import Event

logger = logging.getLogger(__name__)


class JsonlTraceStore:
    """Store trace events in JSONL format, one event per line."""

    def __init__(self, path: Path):
        """Initialize trace store.

        Args:
            path: Path to JSONL file. Parent directories will be created if needed.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = None
        self._thread_lock = threading.Lock()

    def _open(self) -> TextIO:
        if self._file is None:
            self._file = open(self.path, "a", encoding="utf-8")
        return self._file

    def _lock_file(self, f: TextIO, exclusive: bool):
        """Take or drop an advisory lock so concurrent runs can share a file (Unix only)."""
        if sys.platform != "win32":
            import fcntl

            fcntl.flock(f.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_UN)

    def append(self, event: Event):
        """Append an event to the trace store.

        Args:
            event: Event to append.
        """
        line = json.dumps(event.model_dump(), ensure_ascii=False)
        with self._thread_lock:
            f = self._open()
            self._lock_file(f, exclusive=True)
            try:
                f.write(line + "\n")
                f.flush()
            finally:
                self._lock_file(f, exclusive=False)

    def iter_events(self) -> Iterator[Event]:
        """Iterate over all events in the store.

        Yields:
            Event objects from the trace store.
        """
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    yield Event(**data)
                except (json.JSONDecodeError, ValueError) as e:
                    logger.warning("Skipping malformed trace line %s:%d: %s", self.path, lineno, e)

    def close(self):
        """Close the trace store file."""
        with self._thread_lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
