"""Trace system for recording batch runs."""

from mrmm.trace.schema import Event, EventType, new_event, now_iso
from mrmm.trace.store_jsonl import JsonlTraceStore
from mrmm.trace.replay import load_events

__all__ = ["Event", "EventType", "new_event", "now_iso", "JsonlTraceStore", "load_events"]
