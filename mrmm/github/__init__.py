"""GitHub integration for managing milestones."""

from mrmm.github.client import GitHubClient
from mrmm.github.milestones import (
    RESOLUTION_POLICIES,
    MilestoneClient,
    first_open_then_closed,
    most_recently_created,
)

__all__ = [
    "GitHubClient",
    "MilestoneClient",
    "RESOLUTION_POLICIES",
    "first_open_then_closed",
    "most_recently_created",
]
