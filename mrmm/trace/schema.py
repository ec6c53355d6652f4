"""Event schema for batch traces."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Event types in a batch trace."""

    BATCH_START = "batch_start"
    TARGET_OUTCOME = "target_outcome"
    BATCH_END = "batch_end"


class Event(BaseModel):
    """A trace event."""

    model_config = ConfigDict(use_enum_values=True)

    type: EventType = Field(..., description="Event type")
    ts: str = Field(..., description="ISO 8601 timestamp")
    payload: Dict[str, Any] = Field(..., description="Event payload")


def now_iso() -> str:
    """Return current time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_event(event_type: EventType, payload: Dict[str, Any]) -> Event:
    """Create a new event with current timestamp."""
    return Event(type=event_type, ts=now_iso(), payload=payload)
