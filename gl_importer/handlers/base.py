"""Base class and registry for kind handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from gl_importer.errors import ExtractionError
from gl_importer.models import ALREADY_EXISTS_MARKERS, AddressingInfo, ConditionStatus, ResourceKind
from gl_importer.resources import DesiredResource, ObservedResource

# ---------------------------------------------------------------------------
# Handler Registry
# ---------------------------------------------------------------------------

_handler_registry: dict[tuple[str, str], type[KindHandler]] = {}


def register_handler(api_group: str, kind: ResourceKind):
    """Decorator to register a handler class for an API group and kind."""

    def decorator(cls):
        _handler_registry[(api_group, kind.value)] = cls
        cls.api_group = api_group
        cls.kind = kind
        return cls

    return decorator


def get_handler_registry() -> dict[tuple[str, str], type[KindHandler]]:
    """Get the handler registry."""
    return _handler_registry


# ---------------------------------------------------------------------------
# Handler Base Class
# ---------------------------------------------------------------------------


class KindHandler(ABC):
    """Reads addressing fields and existence hints for one kind of GitLab resource."""

    api_group: str = ""
    kind: ResourceKind = ResourceKind.OTHER

    def __init__(self, markers: Iterable[str] = ALREADY_EXISTS_MARKERS):
        self.markers = tuple(markers)

    @property
    @abstractmethod
    def id_field(self) -> str:
        """Name of the spec.forProvider field holding the parent group id."""
        ...

    def extract_addressing(self, desired: DesiredResource) -> AddressingInfo:
        """Read parent id and path from the desired resource or raise ExtractionError."""
        parent_id = desired.get_int(self.id_field)
        if parent_id < 0:
            raise ExtractionError(f"{self.id_field} must not be negative, got {parent_id}")
        path = desired.get_str("path")
        if not path:
            raise ExtractionError("path must not be empty")
        return AddressingInfo(parent_id=parent_id, path=path)

    def already_exists(self, observed: ObservedResource) -> tuple[str, bool]:
        """Inspect the Synced condition for a "name/path already taken" failure."""
        synced = observed.condition()
        exists = synced.status == ConditionStatus.FALSE and any(m in synced.message for m in self.markers)
        return synced.message, exists
