"""Importer for GitLab groups."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from gl_importer.importers.base import Importer, register_importer
from gl_importer.models import GROUP_API_GROUP, RemoteEntity, ResourceKind

if TYPE_CHECKING:
    from gl_importer.client import GitLabClient


@register_importer(GROUP_API_GROUP, ResourceKind.GROUP)
class GroupImporter(Importer):
    """Look up a group among the subgroups of its parent group."""

    def candidates(self, client: GitLabClient, parent_id: int) -> Iterator[RemoteEntity]:
        return client.iter_subgroups(parent_id)

    def full_path(self, client: GitLabClient, external_name: str) -> str:
        group = client.get_group(int(external_name))
        return group["full_path"]
