"""Load a recorded batch trace."""

from pathlib import Path
from typing import List

from mrmm.trace.schema import Event
from mrmm.trace.store_jsonl import JsonlTraceStore


def load_events(path: Path) -> List[Event]:
    """Load all events from a trace file.

    Args:
        path: Path to JSONL trace file.

    Returns:
        List of events, oldest first.
    """
    with JsonlTraceStore(path) as store:
        return list(store.iter_events())
