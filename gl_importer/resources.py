"""Observed/desired composed resources and the per-pass pair store."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from gl_importer.errors import AnnotationError, ExtractionError
from gl_importer.models import (
    EXTERNAL_NAME_ANNOTATION,
    MANAGED_EXTERNAL_NAME_ANNOTATION,
    SYNCED_CONDITION,
    Condition,
    ResourceKind,
)

logger = logging.getLogger("gl-importer")


def split_api_version(api_version: str) -> str:
    """Return the API group of an apiVersion ("" for the core group)."""
    if "/" not in api_version:
        return ""
    return api_version.split("/", 1)[0]


def _for_provider(body: Mapping[str, Any]) -> Mapping[str, Any]:
    spec = body.get("spec") or {}
    return spec.get("forProvider") or {}


@dataclass(frozen=True)
class ObservedResource:
    """Read-only snapshot of a composed resource as last seen by its controller."""

    api_version: str
    kind: str
    annotations: Mapping[str, str] = field(default_factory=dict)
    conditions: tuple[Condition, ...] = ()
    for_provider: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> ObservedResource:
        metadata = body.get("metadata") or {}
        status = body.get("status") or {}
        return cls(
            api_version=str(body.get("apiVersion", "")),
            kind=str(body.get("kind", "")),
            annotations=MappingProxyType(dict(metadata.get("annotations") or {})),
            conditions=tuple(Condition.from_dict(c) for c in status.get("conditions") or ()),
            for_provider=MappingProxyType(copy.deepcopy(dict(_for_provider(body)))),
        )

    @property
    def api_group(self) -> str:
        return split_api_version(self.api_version)

    @property
    def resource_kind(self) -> ResourceKind:
        return ResourceKind.from_kind(self.kind)

    @property
    def external_name(self) -> str:
        return self.annotations.get(EXTERNAL_NAME_ANNOTATION, "")

    def condition(self, condition_type: str = SYNCED_CONDITION) -> Condition:
        for condition in self.conditions:
            if condition.type == condition_type:
                return condition
        return Condition(type=condition_type)


class DesiredResource:
    """Mutable target state of a composed resource.

    Wraps the raw resource document so that fields this package does not
    understand survive the round trip untouched.
    """

    def __init__(self, body: dict[str, Any], ready: str | None = None):
        self.body = body
        self.ready = ready

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> DesiredResource:
        """Build from a request entry of the form {"resource": {...}, "ready": ...}."""
        if "resource" not in entry:
            raise ValueError("desired entry has no 'resource' document")
        return cls(copy.deepcopy(dict(entry["resource"])), ready=entry.get("ready"))

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {"resource": self.body}
        if self.ready is not None:
            entry["ready"] = self.ready
        return entry

    @property
    def api_version(self) -> str:
        return str(self.body.get("apiVersion", ""))

    @property
    def api_group(self) -> str:
        return split_api_version(self.api_version)

    @property
    def kind(self) -> str:
        return str(self.body.get("kind", ""))

    @property
    def for_provider(self) -> Mapping[str, Any]:
        return _for_provider(self.body)

    @property
    def annotations(self) -> dict[str, str]:
        metadata = self.body.setdefault("metadata", {})
        annotations = metadata.get("annotations")
        if annotations is None:
            annotations = metadata["annotations"] = {}
        return annotations

    @property
    def external_name(self) -> str:
        metadata = self.body.get("metadata") or {}
        return (metadata.get("annotations") or {}).get(EXTERNAL_NAME_ANNOTATION, "")

    def get_int(self, field_name: str) -> int:
        """Read an integer from spec.forProvider, refusing anything else."""
        if field_name not in self.for_provider:
            raise ExtractionError(f"cannot get {field_name} from resource: spec.forProvider.{field_name} is not set")
        value = self.for_provider[field_name]
        if isinstance(value, bool):
            raise ExtractionError(f"cannot get {field_name} from resource: expected integer, got bool")
        if isinstance(value, float) and value.is_integer():
            # Struct-encoded JSON carries every number as a double
            value = int(value)
        if not isinstance(value, int):
            raise ExtractionError(
                f"cannot get {field_name} from resource: expected integer, got {type(value).__name__}"
            )
        return value

    def get_str(self, field_name: str) -> str:
        """Read a string from spec.forProvider, refusing anything else."""
        value = self.for_provider.get(field_name)
        if value is None:
            raise ExtractionError(f"cannot get {field_name} from resource: spec.forProvider.{field_name} is not set")
        if not isinstance(value, str):
            raise ExtractionError(
                f"cannot get {field_name} from resource: expected string, got {type(value).__name__}"
            )
        return value

    def set_external_name(self, external_name: str) -> None:
        if not external_name:
            raise AnnotationError("refusing to set an empty external-name")
        self.annotations[EXTERNAL_NAME_ANNOTATION] = external_name

    def mark_managed(self, management_policies: list[str] | None = None) -> None:
        """Flag the external-name as managed by this function.

        When management policies are given they replace spec.managementPolicies.
        """
        self.annotations[MANAGED_EXTERNAL_NAME_ANNOTATION] = "true"
        if management_policies:
            spec = self.body.setdefault("spec", {})
            spec["managementPolicies"] = list(management_policies)

    def __repr__(self) -> str:
        return f"DesiredResource(kind={self.kind!r}, external_name={self.external_name!r})"


class ResourcePairStore:
    """Observed and desired composed resources of one reconciliation pass."""

    def __init__(
        self,
        observed: Mapping[str, ObservedResource],
        desired: Mapping[str, DesiredResource],
    ):
        self.observed = dict(observed)
        self.desired = dict(desired)

    @classmethod
    def from_request(cls, request: Mapping[str, Any]) -> ResourcePairStore:
        """Parse observed and desired composed resources out of a function request."""
        observed_entries = ((request.get("observed") or {}).get("resources")) or {}
        desired_entries = ((request.get("desired") or {}).get("resources")) or {}
        if not isinstance(observed_entries, Mapping) or not isinstance(desired_entries, Mapping):
            raise ValueError("observed and desired resources must be objects keyed by name")

        observed = {}
        for name, entry in observed_entries.items():
            if "resource" not in entry:
                raise ValueError(f"observed entry '{name}' has no 'resource' document")
            observed[name] = ObservedResource.from_dict(entry["resource"])
        desired = {name: DesiredResource.from_dict(entry) for name, entry in desired_entries.items()}
        return cls(observed, desired)

    def observed_names(self) -> set[str]:
        return set(self.observed)

    def desired_names(self) -> set[str]:
        return set(self.desired)

    def pairs(self) -> Iterator[tuple[str, ObservedResource, DesiredResource]]:
        """Yield (name, observed, desired) for names present on both sides."""
        for name in sorted(self.observed_names() - self.desired_names()):
            logger.info(f"No corresponding desired resource for '{name}'; skipping")
        for name in sorted(self.desired_names() - self.observed_names()):
            logger.info(f"No corresponding observed resource for '{name}'; skipping")

        for name in sorted(self.observed_names() & self.desired_names()):
            yield name, self.observed[name], self.desired[name]
