"""Importer for GitLab projects."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from gl_importer.importers.base import Importer, register_importer
from gl_importer.models import PROJECT_API_GROUP, RemoteEntity, ResourceKind

if TYPE_CHECKING:
    from gl_importer.client import GitLabClient


@register_importer(PROJECT_API_GROUP, ResourceKind.PROJECT)
class ProjectImporter(Importer):
    """Look up a project among the direct projects of its namespace group."""

    def candidates(self, client: GitLabClient, parent_id: int) -> Iterator[RemoteEntity]:
        return client.iter_group_projects(parent_id, search="")

    def full_path(self, client: GitLabClient, external_name: str) -> str:
        project = client.get_project(int(external_name))
        return project["path_with_namespace"]
