"""Handler for GitLab groups."""

from __future__ import annotations

from gl_importer.handlers.base import KindHandler, register_handler
from gl_importer.models import GROUP_API_GROUP, ResourceKind


@register_handler(GROUP_API_GROUP, ResourceKind.GROUP)
class GroupHandler(KindHandler):
    """Subgroups are addressed by spec.forProvider.parentId and path."""

    id_field = "parentId"
