"""Shared test fixtures for gl-importer tests."""

import copy
import logging
import sys
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_importer.client import GitLabClient
from gl_importer.models import GROUP_API_GROUP, PROJECT_API_GROUP

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be repeated in the test modules
MOCK_GITLAB_URL = "https://gitlab.example.com"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"

TAKEN_MESSAGE = (
    "create failed: cannot create Gitlab project: POST https://gitlab.com/api/v4/projects: 400 "
    "{message: {name: [has already been taken]}, {path: [has already been taken]}}"
)


@pytest.fixture(autouse=True)
def reset_logger():
    """Handlers installed by the CLI must not leak into later tests."""
    yield
    logger = logging.getLogger("gl-importer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token")


def _resource(
    api_group: str,
    kind: str,
    for_provider: dict[str, Any],
    annotations: dict[str, str] | None = None,
    synced: tuple[str, str] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "apiVersion": f"{api_group}/v1alpha1",
        "kind": kind,
        "metadata": {"name": for_provider.get("path", "unnamed")},
        "spec": {"deletionPolicy": "Orphan", "forProvider": dict(for_provider)},
    }
    if annotations:
        body["metadata"]["annotations"] = dict(annotations)
    if synced:
        status, message = synced
        body["status"] = {
            "conditions": [
                {"type": "Ready", "status": "False", "reason": "Creating"},
                {"type": "Synced", "status": status, "reason": "ReconcileError", "message": message},
            ]
        }
    return body


@pytest.fixture
def make_project():
    """Factory for project resource documents."""

    def factory(namespace_id: Any = 100, path: Any = "demo", **kwargs) -> dict[str, Any]:
        for_provider = {"name": "Demo"}
        if namespace_id is not None:
            for_provider["namespaceId"] = namespace_id
        if path is not None:
            for_provider["path"] = path
        return _resource(PROJECT_API_GROUP, "Project", for_provider, **kwargs)

    return factory


@pytest.fixture
def make_group():
    """Factory for group resource documents."""

    def factory(parent_id: Any = 1, path: Any = "team-a", **kwargs) -> dict[str, Any]:
        for_provider = {"name": "Team A"}
        if parent_id is not None:
            for_provider["parentId"] = parent_id
        if path is not None:
            for_provider["path"] = path
        return _resource(GROUP_API_GROUP, "Group", for_provider, **kwargs)

    return factory


@pytest.fixture
def make_request():
    """Factory for function requests from observed and desired resource documents."""

    def factory(observed: dict[str, dict], desired: dict[str, dict], **input_fields) -> dict[str, Any]:
        request: dict[str, Any] = {
            "meta": {"tag": "external-name"},
            "observed": {
                "composite": {"resource": {"apiVersion": "example.org/v1", "kind": "XGitLab"}},
                "resources": {name: {"resource": copy.deepcopy(body)} for name, body in observed.items()},
            },
            "desired": {
                "composite": {"resource": {"apiVersion": "example.org/v1", "kind": "XGitLab"}},
                "resources": {name: {"resource": copy.deepcopy(body)} for name, body in desired.items()},
            },
        }
        if input_fields:
            request["input"] = {
                "apiVersion": "template.fn.crossplane.io/v1beta1",
                "kind": "Input",
                **input_fields,
            }
        return request

    return factory


@pytest.fixture
def sample_projects() -> list[dict[str, Any]]:
    """Projects in group 100 as returned by the GitLab API."""
    return [
        {
            "id": 5 + i,
            "name": f"service-{i}",
            "path": f"service-{i}",
            "path_with_namespace": f"org/service-{i}",
            "namespace": {"id": 100},
        }
        for i in range(25)
    ]
