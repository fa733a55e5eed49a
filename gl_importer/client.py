"""GitLab API client with pagination support."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import requests

from gl_importer.errors import RemoteError
from gl_importer.models import API_V4, DEFAULT_TIMEOUT, PER_PAGE, RemoteEntity


class GitLabClient:
    """Thin read-only wrapper around GitLab REST API v4.

    Failures are never retried here; the next reconciliation pass is the retry.
    """

    def __init__(self, base_url: str, token: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Accept": "application/json",
            }
        )
        self.timeout = timeout
        self.logger = logging.getLogger("gl-importer")

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make an HTTP request, translating every failure into RemoteError."""
        url = f"{self.api_url}{endpoint}"
        self.logger.debug(f"{method.upper()} {url} {kwargs.get('params', '')}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise RemoteError(
                f"{method} {url} timed out after {self.timeout}s", method=method, url=url
            ) from e
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"{method} {url} failed: {e}", method=method, url=url) from e

        if resp.status_code >= 400:
            body = resp.text[:500]
            self.logger.error(f"API error {resp.status_code}: {body}")
            raise RemoteError(
                f"{method} {url} returned {resp.status_code}",
                method=method,
                url=url,
                status_code=resp.status_code,
                body=body,
            )
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteError(
                f"GET {resp.url} returned invalid JSON", method="GET", url=resp.url, status_code=resp.status_code
            ) from e

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._json(self._request("GET", endpoint, params=params))

    def paginate(self, endpoint: str, params: dict | None = None) -> Iterator[dict]:
        """Lazily yield every item of a paginated endpoint, one page at a time."""
        params = dict(params or {})
        params.setdefault("per_page", PER_PAGE)
        page = 1
        while True:
            params["page"] = page
            resp = self._request("GET", endpoint, params=params)
            data = self._json(resp)
            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                raise RemoteError(
                    f"GET {resp.url} returned {type(data).__name__}, expected a list of objects",
                    method="GET",
                    url=resp.url,
                    status_code=resp.status_code,
                    body=resp.text[:500],
                )
            if not data:
                return
            yield from data

            try:
                current_page = int(resp.headers.get("x-page") or page)
                total_pages = int(resp.headers.get("x-total-pages") or 0)
            except ValueError as e:
                raise RemoteError(
                    f"GET {resp.url} returned invalid pagination headers: {e}",
                    method="GET",
                    url=resp.url,
                    status_code=resp.status_code,
                ) from e
            if total_pages:
                # Check if there are more pages
                if current_page >= total_pages:
                    return
            elif not resp.headers.get("x-next-page"):
                # GitLab omits totals for very large collections
                return
            page = current_page + 1

    # -- Listing helpers --

    def _entities(
        self, endpoint: str, params: dict, convert: Callable[[dict], RemoteEntity]
    ) -> Iterator[RemoteEntity]:
        for item in self.paginate(endpoint, params=params):
            try:
                entity = convert(item)
            except (KeyError, TypeError, AttributeError) as e:
                raise RemoteError(
                    f"GET {self.api_url}{endpoint} returned a malformed entry: {e!r}",
                    method="GET",
                    url=f"{self.api_url}{endpoint}",
                    body=str(item)[:500],
                ) from e
            yield entity

    def iter_subgroups(self, parent_id: int) -> Iterator[RemoteEntity]:
        return self._entities(f"/groups/{parent_id}/subgroups", {"all_available": True}, RemoteEntity.from_group)

    def iter_group_projects(self, parent_id: int, search: str = "") -> Iterator[RemoteEntity]:
        params = {"include_subgroups": False, "search": search}
        return self._entities(f"/groups/{parent_id}/projects", params, RemoteEntity.from_project)

    def get_project(self, project_id: int) -> dict:
        """Get project details by ID."""
        return self.get(f"/projects/{project_id}")

    def get_group(self, group_id: int) -> dict:
        """Get group details by ID."""
        return self.get(f"/groups/{group_id}")
