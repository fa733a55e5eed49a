"""Connection settings for the GitLab API."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from gl_importer.errors import ConfigError
from gl_importer.models import DEFAULT_GITLAB_URL, DEFAULT_TIMEOUT

TOKEN_ENV_VARS = ("GITLAB_API_KEY", "GITLAB_TOKEN")
URL_ENV_VAR = "GITLAB_URL"


@dataclass(frozen=True)
class ClientSettings:
    base_url: str
    token: str
    timeout: float = DEFAULT_TIMEOUT


def resolve_base_url(*overrides: str | None, env: Mapping[str, str] | None = None) -> str:
    """First non-empty override wins, then GITLAB_URL, then gitlab.com."""
    env = os.environ if env is None else env
    for candidate in (*overrides, env.get(URL_ENV_VAR)):
        if candidate:
            return candidate.rstrip("/")
    return DEFAULT_GITLAB_URL


def resolve_token(env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    for name in TOKEN_ENV_VARS:
        token = (env.get(name) or "").strip()
        if token:
            return token
    raise ConfigError(f"token could not be retrieved from environment ({' or '.join(TOKEN_ENV_VARS)} is not set)")


def resolve_settings(
    *base_url_overrides: str | None,
    timeout: float = DEFAULT_TIMEOUT,
    env: Mapping[str, str] | None = None,
) -> ClientSettings:
    """Resolve token and base URL; overrides are given in order of precedence."""
    return ClientSettings(
        base_url=resolve_base_url(*base_url_overrides, env=env),
        token=resolve_token(env),
        timeout=timeout,
    )
