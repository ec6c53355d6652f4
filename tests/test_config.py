"""Tests for token resolution and settings."""

import pytest

from mrmm.config import DEFAULT_API_URL, load_settings, resolve_token
from mrmm.errors import ConfigurationError, MissingTokenError


def test_explicit_token_wins():
    assert resolve_token("flag-token", {"GITHUB_TOKEN": "env-token"}) == "flag-token"


def test_falls_back_to_environment():
    assert resolve_token(None, {"GITHUB_TOKEN": "env-token"}) == "env-token"


@pytest.mark.parametrize("environ", [{}, {"GITHUB_TOKEN": ""}])
def test_missing_token(environ):
    with pytest.raises(MissingTokenError, match="GITHUB_TOKEN"):
        resolve_token(None, environ)


def test_load_settings_defaults():
    settings = load_settings(environ={"GITHUB_TOKEN": "t"})

    assert settings.token == "t"
    assert settings.api_url == DEFAULT_API_URL
    assert settings.max_workers == 1
    assert settings.per_page == 100


def test_api_url_from_environment_and_flag():
    environ = {"GITHUB_TOKEN": "t", "GITHUB_API_URL": "https://ghe.example.com/api/v3/"}

    assert load_settings(environ=environ).api_url == "https://ghe.example.com/api/v3"
    assert load_settings(api_url="https://other.example.com", environ=environ).api_url == "https://other.example.com"


@pytest.mark.parametrize("kwargs", [{"max_workers": 0}, {"per_page": 0}, {"per_page": 101}])
def test_invalid_settings(kwargs):
    with pytest.raises(ConfigurationError):
        load_settings(environ={"GITHUB_TOKEN": "t"}, **kwargs)
