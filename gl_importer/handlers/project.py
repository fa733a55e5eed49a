"""Handler for GitLab projects."""

from __future__ import annotations

from gl_importer.handlers.base import KindHandler, register_handler
from gl_importer.models import PROJECT_API_GROUP, ResourceKind


@register_handler(PROJECT_API_GROUP, ResourceKind.PROJECT)
class ProjectHandler(KindHandler):
    """Projects are addressed by spec.forProvider.namespaceId and path."""

    id_field = "namespaceId"
