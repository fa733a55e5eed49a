"""Dispatch from an observed resource's API group and kind to its handler and importer."""

from __future__ import annotations

from dataclasses import dataclass

# Ensure all handlers and importers are registered
import gl_importer.handlers  # noqa: F401
import gl_importer.importers  # noqa: F401
from gl_importer.handlers import KindHandler, get_handler_registry
from gl_importer.importers import Importer, get_importer_registry
from gl_importer.models import ALREADY_EXISTS_MARKERS


@dataclass(frozen=True)
class Implementation:
    """Handler and importer for one supported kind."""

    handler: KindHandler
    importer: Importer


def is_supported(api_group: str, kind: str) -> bool:
    key = (api_group, kind)
    return key in get_handler_registry() and key in get_importer_registry()


def lookup_implementation(
    api_group: str, kind: str, markers: tuple[str, ...] = ALREADY_EXISTS_MARKERS
) -> Implementation | None:
    """Return fresh handler/importer instances for the kind, or None if unsupported."""
    if not is_supported(api_group, kind):
        return None
    key = (api_group, kind)
    return Implementation(
        handler=get_handler_registry()[key](markers=markers),
        importer=get_importer_registry()[key](),
    )
