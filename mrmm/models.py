"""Milestone and repository data models."""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mrmm.errors import InvalidRepositoryError


class MilestoneState(str, Enum):
    """Milestone states as GitHub spells them."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class RepositoryTarget:
    """A repository addressed as organization/name."""

    organization: str
    name: str

    @classmethod
    def parse(cls, entry: str) -> "RepositoryTarget":
        """Parse an ``org/repo`` string.

        Raises:
            InvalidRepositoryError: If the entry does not split into exactly
                two non-empty segments.
        """
        parts = entry.strip().split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise InvalidRepositoryError(entry)
        return cls(organization=parts[0].strip(), name=parts[1].strip())

    @property
    def path(self) -> str:
        """API path prefix of the repository's milestone collection."""
        return f"/repos/{self.organization}/{self.name}/milestones"

    def __str__(self) -> str:
        return f"{self.organization}/{self.name}"


class Milestone(BaseModel):
    """A GitHub milestone."""

    model_config = ConfigDict(extra="ignore")

    number: Optional[int] = Field(None, description="Server-assigned milestone number")
    title: str = Field(..., description="Milestone title, not unique within a repository")
    state: MilestoneState = Field(MilestoneState.OPEN, description="open or closed")
    description: Optional[str] = None
    due_on: Optional[datetime] = None
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    html_url: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.number is not None


class MilestoneProperties(BaseModel):
    """Fields sent when creating a milestone."""

    title: str
    state: Optional[MilestoneState] = None
    description: Optional[str] = None
    due_on: Optional[Union[datetime, date]] = None

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON body for the create request, omitting unset fields."""
        payload: Dict[str, Any] = {"title": self.title}
        if self.state is not None:
            payload["state"] = self.state.value
        if self.description is not None:
            payload["description"] = self.description
        if self.due_on is not None:
            payload["due_on"] = _format_due_on(self.due_on)
        return payload


def _format_due_on(value: Union[datetime, date]) -> str:
    # GitHub only keeps the date part but requires a full timestamp
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
