"""Data models and constants for gl-importer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_GITLAB_URL = "https://gitlab.com"
API_V4 = "/api/v4"
PER_PAGE = 10

# Seconds to wait for a single page before giving up
DEFAULT_TIMEOUT = 30

EXTERNAL_NAME_ANNOTATION = "crossplane.io/external-name"
MANAGED_EXTERNAL_NAME_ANNOTATION = "crossplane.io/managed-external-name"

PROJECT_API_GROUP = "projects.gitlab.crossplane.io"
GROUP_API_GROUP = "groups.gitlab.crossplane.io"

SYNCED_CONDITION = "Synced"

# Substrings of the Synced message that mean "exists on GitLab already"
ALREADY_EXISTS_MARKERS = ("has already been taken",)

RESPONSE_TTL = "60s"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResourceKind(Enum):
    PROJECT = "Project"
    GROUP = "Group"
    OTHER = "Other"

    @classmethod
    def from_kind(cls, kind: str) -> ResourceKind:
        for member in cls:
            if member.value == kind:
                return member
        return cls.OTHER


class ConditionStatus(Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, raw: Any) -> ConditionStatus:
        if isinstance(raw, bool):
            return cls.TRUE if raw else cls.FALSE
        text = str(raw or "")
        # Wire form may be STATUS_CONDITION_TRUE etc.
        text = text.rsplit("_", 1)[-1]
        for member in cls:
            if member.value.lower() == text.lower():
                return member
        return cls.UNKNOWN


class ResolutionOutcome(Enum):
    SKIPPED = "skipped"
    COPIED_FROM_OBSERVED = "copied_from_observed"
    COPIED_FROM_DESIRED = "copied_from_desired"
    RESOLVED_REMOTELY = "resolved_remotely"
    FAILED = "failed"

    @property
    def changed(self) -> bool:
        return self in (
            ResolutionOutcome.COPIED_FROM_OBSERVED,
            ResolutionOutcome.COPIED_FROM_DESIRED,
            ResolutionOutcome.RESOLVED_REMOTELY,
        )


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Condition:
    """A status condition as reported by the managing controller."""

    type: str
    status: ConditionStatus = ConditionStatus.UNKNOWN
    reason: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Condition:
        return cls(
            type=str(data.get("type", "")),
            status=ConditionStatus.parse(data.get("status")),
            reason=str(data.get("reason") or ""),
            message=str(data.get("message") or ""),
        )


@dataclass(frozen=True)
class AddressingInfo:
    """Where a resource should live on GitLab: parent group id plus path."""

    parent_id: int
    path: str


@dataclass(frozen=True)
class RemoteEntity:
    """A project or group as listed by the GitLab API."""

    id: int
    path: str
    parent_id: int | None = None
    full_path: str = ""
    name: str = ""

    @classmethod
    def from_project(cls, data: dict) -> RemoteEntity:
        namespace = data.get("namespace") or {}
        return cls(
            id=data["id"],
            path=data.get("path", ""),
            parent_id=namespace.get("id"),
            full_path=data.get("path_with_namespace", ""),
            name=data.get("name", ""),
        )

    @classmethod
    def from_group(cls, data: dict) -> RemoteEntity:
        return cls(
            id=data["id"],
            path=data.get("path", ""),
            parent_id=data.get("parent_id"),
            full_path=data.get("full_path", ""),
            name=data.get("name", ""),
        )


@dataclass
class FunctionInput:
    """Optional configuration carried on the function request."""

    base_url: str = ""
    management_policies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict | None) -> FunctionInput:
        data = data or {}
        policies = data.get("managementPolicies") or []
        return cls(
            base_url=str(data.get("baseURL") or ""),
            management_policies=[str(p) for p in policies],
        )


@dataclass
class ResolutionResult:
    """Result of processing a single observed/desired pair."""

    name: str
    kind: str
    outcome: ResolutionOutcome
    external_name: str = ""
    detail: str = ""

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "kind": self.kind,
            "outcome": self.outcome.value,
        }
        if self.external_name:
            d["external_name"] = self.external_name
        if self.detail:
            d["detail"] = self.detail
        return d
