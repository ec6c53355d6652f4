"""
Protocol-based interfaces for the pieces the batch engine talks to.

These protocols define the contracts a transport or a trace store must meet
so MilestoneClient and BatchExecutor can be driven by real GitHub calls or by
in-memory fakes.
"""

from typing import Any, Dict, Iterator, Optional, Protocol

from mrmm.trace.schema import Event


class Transport(Protocol):
    """
    Protocol for issuing requests against the GitHub REST API.

    Implementations own authentication, TLS and JSON encoding, and raise
    mrmm.errors.RemoteError subclasses on failure.
    """

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue one request.

        Args:
            method: HTTP method (e.g., "GET", "PATCH")
            path: API path starting with "/", e.g. "/repos/org/repo/milestones"
            params: Optional query parameters
            body: Optional JSON body

        Returns:
            Decoded JSON body, or None for an empty response
        """
        ...


class TraceStore(Protocol):
    """
    Protocol for event storage.

    Callers can supply their own store, or use mrmm's JsonlTraceStore.
    """

    def append(self, event: Event) -> None:
        """Append an event to the store."""
        ...

    def iter_events(self) -> Iterator[Event]:
        """Iterate over all events in the store."""
        ...

    def close(self) -> None:
        """Close the store and release resources."""
        ...
