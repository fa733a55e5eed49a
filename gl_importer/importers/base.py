"""Base class and registry for importers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

from gl_importer.errors import NotFoundError
from gl_importer.models import AddressingInfo, RemoteEntity, ResourceKind

if TYPE_CHECKING:
    from gl_importer.client import GitLabClient

# ---------------------------------------------------------------------------
# Importer Registry
# ---------------------------------------------------------------------------

_importer_registry: dict[tuple[str, str], type[Importer]] = {}


def register_importer(api_group: str, kind: ResourceKind):
    """Decorator to register an importer class for an API group and kind."""

    def decorator(cls):
        _importer_registry[(api_group, kind.value)] = cls
        cls.api_group = api_group
        cls.kind = kind
        return cls

    return decorator


def get_importer_registry() -> dict[tuple[str, str], type[Importer]]:
    """Get the importer registry."""
    return _importer_registry


# ---------------------------------------------------------------------------
# Importer Base Class
# ---------------------------------------------------------------------------


class Importer(ABC):
    """Finds the id of an existing GitLab resource from its parent id and path."""

    api_group: str = ""
    kind: ResourceKind = ResourceKind.OTHER

    def __init__(self):
        self.logger = logging.getLogger("gl-importer")

    @abstractmethod
    def candidates(self, client: GitLabClient, parent_id: int) -> Iterator[RemoteEntity]:
        """Lazily list the entities that live directly under the parent group."""
        ...

    @abstractmethod
    def full_path(self, client: GitLabClient, external_name: str) -> str:
        """Fetch the full namespace path of an already resolved resource."""
        ...

    def resolve(self, client: GitLabClient, addressing: AddressingInfo) -> str:
        """Return the external-name of the first entity whose path matches exactly.

        Every page is consumed before giving up with NotFoundError.
        """
        inspected = 0
        for entity in self.candidates(client, addressing.parent_id):
            inspected += 1
            if entity.path == addressing.path:
                self.logger.debug(
                    f"Found {self.kind.value} '{addressing.path}' under {addressing.parent_id}: id={entity.id}"
                )
                return str(entity.id)
        raise NotFoundError(self.kind.value, addressing.parent_id, addressing.path, inspected=inspected)
