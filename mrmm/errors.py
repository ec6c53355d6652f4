"""Exception hierarchy for mrmm."""

from typing import Optional


class MrmmError(Exception):
    """Base class for all mrmm errors."""


class ConfigurationError(MrmmError):
    """Raised for fatal problems detected before any remote call."""


class MissingTokenError(ConfigurationError):
    """Raised when no GitHub token was given on the command line or in the environment."""


class RepositoryListError(ConfigurationError):
    """Raised when the repository list file cannot be read."""


class InvalidRepositoryError(RepositoryListError):
    """Raised when a repository entry is not in the org/repo format."""

    def __init__(self, entry: str):
        self.entry = entry
        super().__init__(
            f"Aborting. Some repositories are not in the org/repo format, e.g. {entry!r}"
        )


class MilestoneNotFound(MrmmError):
    """Raised when no milestone with the given title exists in a repository."""

    def __init__(self, repository: str, title: str):
        self.repository = repository
        self.title = title
        super().__init__(f"milestone {title!r} not found in {repository}")


class RemoteError(MrmmError):
    """Raised when the GitHub API call did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RemoteRejected(RemoteError):
    """GitHub refused the request payload (HTTP 422)."""


class TransportError(RemoteError):
    """Network failure or an unexpected HTTP status."""


class AuthenticationFailed(TransportError):
    """The token was rejected (HTTP 401)."""


class PermissionDenied(TransportError):
    """The token lacks access to the resource (HTTP 403)."""


class RateLimited(TransportError):
    """The API rate limit was exhausted."""

    def __init__(self, message: str, status_code: Optional[int] = None, reset_at: Optional[int] = None):
        self.reset_at = reset_at
        super().__init__(message, status_code)


class ResourceNotFound(TransportError):
    """The repository or milestone does not exist or is not visible (HTTP 404)."""


class InvalidResponse(TransportError):
    """GitHub answered with a body that is not the expected milestone data."""
