"""Kind handlers for gl-importer."""

from gl_importer.handlers.base import KindHandler, get_handler_registry, register_handler

# Import all handlers to register them
from gl_importer.handlers.group import GroupHandler
from gl_importer.handlers.project import ProjectHandler

__all__ = [
    "KindHandler",
    "register_handler",
    "get_handler_registry",
    "GroupHandler",
    "ProjectHandler",
]
