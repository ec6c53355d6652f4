"""Apply one command to every repository of a list, isolating failures."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from mrmm.commands import Command
from mrmm.core.interfaces import TraceStore
from mrmm.errors import MrmmError
from mrmm.github.milestones import MilestoneClient
from mrmm.models import Milestone, RepositoryTarget
from mrmm.trace.schema import EventType, new_event

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class BatchOutcome:
    """Result of applying the command to one repository."""

    target: RepositoryTarget
    status: OutcomeStatus
    milestone: Optional[Milestone] = None
    reason: Optional[str] = None
    error: Optional[MrmmError] = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    @property
    def error_kind(self) -> Optional[str]:
        return type(self.error).__name__ if self.error is not None else None


@dataclass(frozen=True)
class BatchReport:
    """Outcomes of one batch, in repository-list order."""

    command: Command
    outcomes: Tuple[BatchOutcome, ...]

    def __iter__(self) -> Iterator[BatchOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


OutcomeCallback = Callable[[BatchOutcome], None]


class BatchExecutor:
    """Runs a command against each repository.

    With ``max_workers == 1`` repositories are processed strictly one after
    another. With more workers a bounded thread pool is used; outcomes are
    still reported in input order. A failure in one repository is recorded
    and never stops or cancels work on the others.
    """

    def __init__(
        self,
        max_workers: int = 1,
        trace_store: Optional[TraceStore] = None,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        """Initialize executor.

        Args:
            max_workers: Number of repositories processed concurrently.
            trace_store: Optional store receiving batch_start, target_outcome
                and batch_end events.
            on_outcome: Optional callback invoked with each outcome, in input order.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.trace_store = trace_store
        self.on_outcome = on_outcome

    def run(
        self,
        targets: Sequence[RepositoryTarget],
        command: Command,
        client: MilestoneClient,
    ) -> BatchReport:
        """Apply command to every target.

        Args:
            targets: Repositories in the order they should be reported.
            command: Command to apply.
            client: Milestone client shared by all targets.

        Returns:
            BatchReport with exactly one outcome per target.
        """
        self._emit(
            EventType.BATCH_START,
            {
                "command": command.name,
                "title": command.title,
                "repositories": [str(t) for t in targets],
                "max_workers": self.max_workers,
            },
        )

        def attempt(target: RepositoryTarget) -> BatchOutcome:
            return self._attempt(target, command, client)

        outcomes = []
        if self.max_workers == 1 or len(targets) <= 1:
            for outcome in map(attempt, targets):
                self._record(command, outcome)
                outcomes.append(outcome)
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(targets))) as pool:
                # map yields in submission order regardless of completion order
                for outcome in pool.map(attempt, targets):
                    self._record(command, outcome)
                    outcomes.append(outcome)

        report = BatchReport(command=command, outcomes=tuple(outcomes))
        self._emit(
            EventType.BATCH_END,
            {
                "command": command.name,
                "title": command.title,
                "total": len(report),
                "succeeded": len(report.succeeded),
                "failed": len(report.failed),
            },
        )
        return report

    def _attempt(self, target: RepositoryTarget, command: Command, client: MilestoneClient) -> BatchOutcome:
        logger.info("%s milestone %s in repository %s", command.verb, command.title, target)
        try:
            milestone = command.apply(client, target)
        except MrmmError as e:
            logger.info("Failed to %s milestone %s in repository %s: %s", command.name, command.title, target, e)
            return BatchOutcome(target=target, status=OutcomeStatus.FAILED, reason=str(e), error=e)
        return BatchOutcome(target=target, status=OutcomeStatus.SUCCEEDED, milestone=milestone)

    def _record(self, command: Command, outcome: BatchOutcome):
        payload = {
            "command": command.name,
            "title": command.title,
            "repository": str(outcome.target),
            "status": outcome.status.value,
        }
        if outcome.milestone is not None:
            payload["number"] = outcome.milestone.number
        if not outcome.ok:
            payload["error"] = outcome.error_kind
            payload["reason"] = outcome.reason
        self._emit(EventType.TARGET_OUTCOME, payload)
        if self.on_outcome is not None:
            self.on_outcome(outcome)

    def _emit(self, event_type: EventType, payload: dict):
        if self.trace_store is not None:
            self.trace_store.append(new_event(event_type, payload))
