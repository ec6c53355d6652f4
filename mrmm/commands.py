"""Milestone commands applied to each repository of a batch."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from mrmm.github.milestones import MilestoneClient
from mrmm.models import Milestone, MilestoneProperties, MilestoneState, RepositoryTarget


@dataclass(frozen=True)
class CreateMilestone:
    title: str
    description: Optional[str] = None
    due_on: Optional[date] = None

    name = "create"
    verb = "Creating"
    done = "Created"

    def apply(self, client: MilestoneClient, target: RepositoryTarget) -> Milestone:
        props = MilestoneProperties(
            title=self.title,
            state=MilestoneState.OPEN,
            description=self.description,
            due_on=self.due_on,
        )
        return client.create(target, props)


@dataclass(frozen=True)
class CloseMilestone:
    title: str

    name = "close"
    verb = "Closing"
    done = "Closed"

    def apply(self, client: MilestoneClient, target: RepositoryTarget) -> Milestone:
        return client.close(target, self.title)


@dataclass(frozen=True)
class DeleteMilestone:
    title: str

    name = "delete"
    verb = "Deleting"
    done = "Deleted"

    def apply(self, client: MilestoneClient, target: RepositoryTarget) -> Milestone:
        return client.delete_by_title(target, self.title)


Command = Union[CreateMilestone, CloseMilestone, DeleteMilestone]


def build_command(
    name: str,
    title: str,
    description: Optional[str] = None,
    due_on: Optional[date] = None,
) -> Command:
    """Build the command for a subcommand name.

    The title is taken as given; callers that need a non-empty title check it first.

    Raises:
        ValueError: For an unknown command name, or creation-only options on close/delete.
    """
    if name == CreateMilestone.name:
        return CreateMilestone(title, description=description, due_on=due_on)
    if name not in (CloseMilestone.name, DeleteMilestone.name):
        raise ValueError(f"unknown command: {name}")
    if description is not None or due_on is not None:
        raise ValueError(f"description and due date only apply to {CreateMilestone.name}")
    if name == CloseMilestone.name:
        return CloseMilestone(title)
    return DeleteMilestone(title)
