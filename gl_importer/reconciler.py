"""Reconciliation pass: pair resources, decide, resolve and write back external-names."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from gl_importer.client import GitLabClient
from gl_importer.errors import ConfigError, ImporterError
from gl_importer.logging_utils import log_result
from gl_importer.models import (
    ALREADY_EXISTS_MARKERS,
    FunctionInput,
    ResolutionOutcome,
    ResolutionResult,
)
from gl_importer.registry import lookup_implementation
from gl_importer.resources import DesiredResource, ObservedResource, ResourcePairStore

ClientFactory = Callable[[], GitLabClient]


@dataclass
class ReconcileReport:
    """Outcome of one pass over all observed/desired pairs."""

    changed: dict[str, DesiredResource] = field(default_factory=dict)
    results: list[ResolutionResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def count(self, outcome: ResolutionOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    def summary(self) -> dict[str, int]:
        return {
            "resources": len(self.results),
            "resolved": self.count(ResolutionOutcome.RESOLVED_REMOTELY),
            "changed": len(self.changed),
            "errors": self.count(ResolutionOutcome.FAILED),
        }


class Reconciler:
    """Resolves external-names for GitLab projects and groups that already exist.

    The GitLab client is either passed in directly or built on first use by
    ``client_factory``, so passes that never need a lookup never need credentials.
    """

    def __init__(
        self,
        client: GitLabClient | None = None,
        function_input: FunctionInput | None = None,
        client_factory: ClientFactory | None = None,
        markers: tuple[str, ...] = ALREADY_EXISTS_MARKERS,
    ):
        self.client = client
        self.client_factory = client_factory
        self.function_input = function_input or FunctionInput()
        self.markers = tuple(markers)
        self.logger = logging.getLogger("gl-importer")

    def _get_client(self) -> GitLabClient:
        if self.client is None:
            if self.client_factory is None:
                raise ConfigError("no GitLab client configured")
            self.client = self.client_factory()
        return self.client

    def reconcile(self, store: ResourcePairStore) -> ReconcileReport:
        report = ReconcileReport()
        for name, observed, desired in store.pairs():
            result = self.process(name, observed, desired)
            if result is None:
                continue
            self._record(report, result)
            if result.outcome.changed:
                report.changed[name] = desired
        return report

    def process(self, name: str, observed: ObservedResource, desired: DesiredResource) -> ResolutionResult | None:
        """Handle one pair. Returns None for kinds this package does not manage."""
        impl = lookup_implementation(observed.api_group, observed.kind, self.markers)
        if impl is None:
            self.logger.debug(f"Ignoring '{name}' ({observed.api_version}, {observed.kind})")
            return None

        kind = observed.kind
        self.logger.debug(f"Processing {kind} '{name}'")

        if observed.external_name:
            desired.set_external_name(observed.external_name)
            return ResolutionResult(
                name=name,
                kind=kind,
                outcome=ResolutionOutcome.COPIED_FROM_OBSERVED,
                external_name=observed.external_name,
                detail="external-name already set in observed",
            )

        if desired.external_name:
            return ResolutionResult(
                name=name,
                kind=kind,
                outcome=ResolutionOutcome.COPIED_FROM_DESIRED,
                external_name=desired.external_name,
                detail="external-name already set in desired",
            )

        message, exists = impl.handler.already_exists(observed)
        if not exists:
            return ResolutionResult(
                name=name,
                kind=kind,
                outcome=ResolutionOutcome.SKIPPED,
                detail=f"{kind} in transition",
            )

        self.logger.info(f"{kind} '{name}' already exists on GitLab ({message}); fetching external-name")
        try:
            addressing = impl.handler.extract_addressing(desired)
            external_name = impl.importer.resolve(self._get_client(), addressing)
            desired.set_external_name(external_name)
        except ImporterError as e:
            return ResolutionResult(
                name=name,
                kind=kind,
                outcome=ResolutionOutcome.FAILED,
                detail=f"{type(e).__name__}: {e}",
            )

        desired.mark_managed(self.function_input.management_policies)
        return ResolutionResult(
            name=name,
            kind=kind,
            outcome=ResolutionOutcome.RESOLVED_REMOTELY,
            external_name=external_name,
            detail=f"parent={addressing.parent_id} path={addressing.path}",
        )

    def _record(self, report: ReconcileReport, result: ResolutionResult) -> ResolutionResult:
        report.results.append(result)
        if result.outcome == ResolutionOutcome.FAILED:
            report.warnings.append(f"cannot resolve external-name of '{result.name}': {result.detail}")

        log_result(self.logger, result)
        return result
