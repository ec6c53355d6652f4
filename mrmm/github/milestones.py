"""Title-addressed milestone operations on top of the number-addressed REST API.

GitHub identifies a milestone by its per-repository ``number`` while operators
think in titles, and titles are not unique. Every mutating operation here
first resolves the title with a resolution policy, then acts on the number.

The default policy, ``first_open_then_closed``, scans open milestones page by
page in the order GitHub returns them, then closed milestones the same way,
and returns the first exact (case-sensitive) title match. When several
milestones share a title, that first one is the one closed or deleted.
"""

import logging
from typing import Any, Callable, Dict, Iterator, Optional

from pydantic import ValidationError

from mrmm.config import DEFAULT_PER_PAGE
from mrmm.core.interfaces import Transport
from mrmm.errors import InvalidResponse, MilestoneNotFound
from mrmm.models import Milestone, MilestoneProperties, MilestoneState, RepositoryTarget

logger = logging.getLogger(__name__)

ResolutionPolicy = Callable[["MilestoneClient", RepositoryTarget, str], Milestone]

# Scan order shared by the policies below.
SCAN_ORDER = (MilestoneState.OPEN, MilestoneState.CLOSED)


def first_open_then_closed(client: "MilestoneClient", target: RepositoryTarget, title: str) -> Milestone:
    """Return the first title match of the open scan, else of the closed scan."""
    for state in SCAN_ORDER:
        for milestone in client.list_milestones(target, state):
            if milestone.title == title:
                return milestone
    raise MilestoneNotFound(str(target), title)


def most_recently_created(client: "MilestoneClient", target: RepositoryTarget, title: str) -> Milestone:
    """Return the title match with the latest creation time.

    Scans every page of both states. Matches without a creation time rank
    lowest; ties keep scan order.
    """
    best: Optional[Milestone] = None
    for state in SCAN_ORDER:
        for milestone in client.list_milestones(target, state):
            if milestone.title != title:
                continue
            if best is None or _created_key(milestone) > _created_key(best):
                best = milestone
    if best is None:
        raise MilestoneNotFound(str(target), title)
    return best


def _created_key(milestone: Milestone) -> float:
    return milestone.created_at.timestamp() if milestone.created_at else float("-inf")


def _parse_milestone(data: Any, method: str, path: str) -> Milestone:
    try:
        return Milestone.model_validate(data)
    except ValidationError as e:
        raise InvalidResponse(f"{method} {path}: unexpected milestone payload: {e}") from e


RESOLUTION_POLICIES: Dict[str, ResolutionPolicy] = {
    "first": first_open_then_closed,
    "newest": most_recently_created,
}


class MilestoneClient:
    """Create, resolve, close and delete milestones in one repository at a time."""

    def __init__(
        self,
        transport: Transport,
        per_page: int = DEFAULT_PER_PAGE,
        resolve: ResolutionPolicy = first_open_then_closed,
    ):
        """Initialize milestone client.

        Args:
            transport: Object issuing the REST calls.
            per_page: Listing page size.
            resolve: Title resolution policy used by find_by_title.
        """
        self.transport = transport
        self.per_page = per_page
        self.resolve = resolve

    def create(self, target: RepositoryTarget, properties: MilestoneProperties) -> Milestone:
        """Create a milestone. Duplicate titles are not checked.

        Raises:
            RemoteRejected: If GitHub rejects the payload.
            TransportError: On network or HTTP failure.
            InvalidResponse: If the reply is not a milestone.
        """
        data = self.transport.request("POST", target.path, body=properties.to_payload())
        milestone = _parse_milestone(data, "POST", target.path)
        logger.debug("Created milestone #%s %r in %s", milestone.number, milestone.title, target)
        return milestone

    def list_milestones(self, target: RepositoryTarget, state: MilestoneState) -> Iterator[Milestone]:
        """Yield milestones in the given state, fetching pages lazily.

        Stops after the first page shorter than the page size.

        Raises:
            InvalidResponse: If a page is not a list of milestones.
        """
        page = 1
        while True:
            params = {"state": state.value, "per_page": self.per_page, "page": page}
            items = self.transport.request("GET", target.path, params=params)
            if items is None:
                items = []
            if not isinstance(items, list):
                raise InvalidResponse(
                    f"GET {target.path}: expected a list of milestones, got {type(items).__name__}"
                )
            logger.debug("Listed %d %s milestones in %s (page %d)", len(items), state.value, target, page)
            for item in items:
                yield _parse_milestone(item, "GET", target.path)
            if len(items) < self.per_page:
                return
            page += 1

    def find_by_title(self, target: RepositoryTarget, title: str) -> Milestone:
        """Resolve a title to a milestone with the configured policy.

        Raises:
            MilestoneNotFound: If no milestone in either state has this title.
        """
        return self.resolve(self, target, title)

    def close(self, target: RepositoryTarget, title: str) -> Milestone:
        """Close the milestone with this title.

        Closing an already closed milestone re-sends the update, which
        GitHub accepts.

        Raises:
            MilestoneNotFound: Before any write, if the title does not resolve.
            InvalidResponse: If the update reply is not a milestone.
        """
        milestone = self.find_by_title(target, title)
        path = f"{target.path}/{milestone.number}"
        data = self.transport.request("PATCH", path, body={"state": MilestoneState.CLOSED.value})
        return _parse_milestone(data, "PATCH", path)

    def delete_by_title(self, target: RepositoryTarget, title: str) -> Milestone:
        """Delete the milestone with this title and return what was deleted.

        Raises:
            MilestoneNotFound: Before any write, if the title does not resolve.
        """
        milestone = self.find_by_title(target, title)
        self.transport.request("DELETE", f"{target.path}/{milestone.number}")
        return milestone
