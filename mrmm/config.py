"""Runtime configuration."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from mrmm.errors import ConfigurationError, MissingTokenError

TOKEN_ENV_VAR = "GITHUB_TOKEN"
API_URL_ENV_VAR = "GITHUB_API_URL"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PER_PAGE = 100


@dataclass(frozen=True)
class Settings:
    """Configuration built once at startup and passed to the clients."""

    token: str
    api_url: str = DEFAULT_API_URL
    per_page: int = DEFAULT_PER_PAGE
    max_workers: int = 1
    timeout: float = 30.0
    max_retries: int = 1


def resolve_token(explicit: Optional[str], environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the token from the command line, falling back to GITHUB_TOKEN.

    Args:
        explicit: Token given on the command line, if any.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        The token.

    Raises:
        MissingTokenError: If neither source provides a non-empty token.
    """
    if explicit:
        return explicit
    environ = os.environ if environ is None else environ
    token = environ.get(TOKEN_ENV_VAR)
    if token:
        return token
    raise MissingTokenError(
        f"please make sure the {TOKEN_ENV_VAR} environment variable is set to a valid token value"
    )


def load_settings(
    token: Optional[str] = None,
    api_url: Optional[str] = None,
    max_workers: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build Settings from command-line values and the environment."""
    environ = os.environ if environ is None else environ
    if max_workers < 1:
        raise ConfigurationError(f"worker count must be at least 1, got {max_workers}")
    if not 1 <= per_page <= DEFAULT_PER_PAGE:
        raise ConfigurationError(f"page size must be between 1 and {DEFAULT_PER_PAGE}, got {per_page}")
    return Settings(
        token=resolve_token(token, environ),
        api_url=(api_url or environ.get(API_URL_ENV_VAR) or DEFAULT_API_URL).rstrip("/"),
        per_page=per_page,
        max_workers=max_workers,
    )
