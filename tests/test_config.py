"""Tests for credential and base URL resolution."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_importer.config import resolve_base_url, resolve_settings, resolve_token
from gl_importer.errors import ConfigError
from gl_importer.models import DEFAULT_GITLAB_URL


class TestBaseUrl:
    """Explicit input beats environment beats default."""

    def test_explicit_wins(self):
        env = {"GITLAB_URL": "https://env.example.com"}
        assert resolve_base_url("https://input.example.com", env=env) == "https://input.example.com"

    def test_first_non_empty_override(self):
        env = {"GITLAB_URL": "https://env.example.com"}
        assert resolve_base_url("", None, "https://cli.example.com/", env=env) == "https://cli.example.com"

    def test_environment(self):
        assert resolve_base_url("", env={"GITLAB_URL": "https://env.example.com"}) == "https://env.example.com"

    def test_default(self):
        assert resolve_base_url(env={}) == DEFAULT_GITLAB_URL


class TestToken:
    def test_api_key_preferred(self):
        env = {"GITLAB_API_KEY": "key", "GITLAB_TOKEN": "token"}
        assert resolve_token(env) == "key"

    def test_gitlab_token_fallback(self):
        assert resolve_token({"GITLAB_TOKEN": " token "}) == "token"

    def test_missing(self):
        with pytest.raises(ConfigError, match="GITLAB_API_KEY"):
            resolve_token({"GITLAB_API_KEY": "  "})


def test_resolve_settings():
    settings = resolve_settings(None, timeout=3, env={"GITLAB_API_KEY": "key"})
    assert settings.base_url == DEFAULT_GITLAB_URL
    assert settings.token == "key"
    assert settings.timeout == 3
