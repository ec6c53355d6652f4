"""GitHub API client."""

import logging
import threading
import time
from typing import Any, Dict, Optional

import requests

from mrmm.config import DEFAULT_API_URL, Settings
from mrmm.errors import (
    AuthenticationFailed,
    InvalidResponse,
    PermissionDenied,
    RateLimited,
    RemoteError,
    RemoteRejected,
    ResourceNotFound,
    TransportError,
)

logger = logging.getLogger(__name__)


class GitHubClient:
    """Lightweight GitHub REST transport with typed errors.

    Safe to share between worker threads: each thread gets its own
    ``requests.Session`` carrying the same headers.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        max_retries: int = 1,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub token sent as a bearer credential.
            base_url: API root, e.g. https://api.github.com or a GHES /api/v3 URL.
            timeout: Per-request timeout in seconds.
            max_retries: Total attempts for network-level failures. HTTP error
                responses are never retried.
            session: Optional pre-built session (for testing). It is used by
                every thread as given.
        """
        if not token:
            raise ValueError("GitHub token is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "mrmm",
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self.headers)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The session for the calling thread, created on first use."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
        return session

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubClient":
        return cls(
            settings.token,
            base_url=settings.api_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
        )

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API path, starting with "/".
            params: Query parameters.
            body: JSON body.

        Returns:
            Decoded JSON, or None when the response has no content.

        Raises:
            RemoteRejected: On a 422 validation failure.
            TransportError: On network failure or any other error status.
        """
        url = f"{self.base_url}{path}"
        response = self._send(method, url, params=params, json=body)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        if response.status_code >= 400:
            raise _error_for(method, path, response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponse(f"{method} {path}: invalid JSON in response: {e}", response.status_code) from e

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send with exponential backoff on connection errors and timeouts."""
        for attempt in range(self.max_retries):
            try:
                return self.session.request(method, url, timeout=self.timeout, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt == self.max_retries - 1:
                    raise TransportError(f"{method} {url}: {e}") from e
                wait_time = 2 ** attempt
                logger.debug("%s %s failed (%s), retrying in %ds", method, url, e, wait_time)
                time.sleep(wait_time)
            except requests.RequestException as e:
                raise TransportError(f"{method} {url}: {e}") from e
        raise TransportError(f"{method} {url}: failed after {self.max_retries} attempts")


def _error_for(method: str, path: str, response: requests.Response) -> RemoteError:
    """Map an HTTP error response to the matching exception."""
    status = response.status_code
    detail = _error_detail(response)
    message = f"{method} {path}: HTTP {status}: {detail}"

    if status == 401:
        return AuthenticationFailed(message, status)
    if status == 429:
        return RateLimited(message, status, reset_at=_rate_limit_reset(response))
    if status == 403:
        # GitHub reports primary and secondary rate limits as 403 too.
        if response.headers.get("X-RateLimit-Remaining") == "0" or "Retry-After" in response.headers:
            return RateLimited(message, status, reset_at=_rate_limit_reset(response))
        return PermissionDenied(message, status)
    if status == 404:
        return ResourceNotFound(message, status)
    if status == 422:
        return RemoteRejected(message, status)
    return TransportError(message, status)


def _rate_limit_reset(response: requests.Response) -> Optional[int]:
    reset = response.headers.get("X-RateLimit-Reset")
    return int(reset) if reset and reset.isdigit() else None


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "no detail"
    if not isinstance(data, dict):
        return str(data)
    detail = data.get("message") or response.reason or "no detail"
    errors = data.get("errors") or []
    codes = []
    for err in errors:
        if isinstance(err, dict):
            field = err.get("field")
            code = err.get("code")
            codes.append(f"{field}: {code}" if field else str(code or err.get("message", "")))
        else:
            codes.append(str(err))
    if codes:
        detail = f"{detail} ({', '.join(codes)})"
    return detail
