"""Importers for gl-importer."""

from gl_importer.importers.base import Importer, get_importer_registry, register_importer

# Import all importers to register them
from gl_importer.importers.group import GroupImporter
from gl_importer.importers.project import ProjectImporter

__all__ = [
    "Importer",
    "register_importer",
    "get_importer_registry",
    "GroupImporter",
    "ProjectImporter",
]
