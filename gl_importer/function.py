"""Composition function boundary: request document in, response document out.

Request and response follow the JSON form of Crossplane's RunFunctionRequest
and RunFunctionResponse. Only the parts this function reads or writes are
interpreted; everything else in ``desired`` is passed through unchanged.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from gl_importer.client import GitLabClient
from gl_importer.config import resolve_settings
from gl_importer.logging_utils import log_summary
from gl_importer.models import DEFAULT_TIMEOUT, RESPONSE_TTL, FunctionInput
from gl_importer.reconciler import ClientFactory, Reconciler
from gl_importer.resources import ResourcePairStore

SEVERITY_FATAL = "SEVERITY_FATAL"
SEVERITY_WARNING = "SEVERITY_WARNING"
TARGET_COMPOSITE_AND_CLAIM = "TARGET_COMPOSITE_AND_CLAIM"

logger = logging.getLogger("gl-importer")


def default_client_factory(
    function_input: FunctionInput, base_url: str | None = None, timeout: float = DEFAULT_TIMEOUT
) -> ClientFactory:
    """Build a client lazily; the request's baseURL beats the caller's base_url."""

    def factory() -> GitLabClient:
        settings = resolve_settings(function_input.base_url, base_url, timeout=timeout)
        logger.debug(f"Connecting to {settings.base_url}")
        return GitLabClient(settings.base_url, settings.token, timeout=settings.timeout)

    return factory


def new_response(request: Mapping[str, Any]) -> dict[str, Any]:
    """Start a response that carries the request's desired state forward."""
    meta = request.get("meta") or {}
    return {
        "meta": {"tag": meta.get("tag", ""), "ttl": RESPONSE_TTL},
        "desired": copy.deepcopy(dict(request.get("desired") or {})),
        "results": [],
        "conditions": [],
    }


def _condition(rsp: dict, status: bool, reason: str, message: str = "") -> None:
    condition = {
        "type": "FunctionSuccess",
        "status": "STATUS_CONDITION_TRUE" if status else "STATUS_CONDITION_FALSE",
        "reason": reason,
        "target": TARGET_COMPOSITE_AND_CLAIM,
    }
    if message:
        condition["message"] = message
    rsp["conditions"].append(condition)


def _result(rsp: dict, severity: str, message: str) -> None:
    rsp["results"].append({"severity": severity, "message": message, "target": TARGET_COMPOSITE_AND_CLAIM})


def fatal(rsp: dict, message: str) -> dict:
    logger.error(message)
    _condition(rsp, False, "InternalError", "Something went wrong.")
    _result(rsp, SEVERITY_FATAL, message)
    return rsp


def is_fatal(rsp: Mapping[str, Any]) -> bool:
    return any(r.get("severity") == SEVERITY_FATAL for r in rsp.get("results", []))


def run_function(
    request: Mapping[str, Any],
    client: GitLabClient | None = None,
    client_factory: ClientFactory | None = None,
    base_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict[str, Any]:
    """Run one reconciliation pass for a function request and build the response."""
    meta = request.get("meta") or {}
    logger.info(f"Running function (tag={meta.get('tag', '')!r})")
    rsp = new_response(request)

    raw_input = request.get("input")
    if raw_input is not None and not isinstance(raw_input, Mapping):
        return fatal(rsp, f"cannot get function input: expected object, got {type(raw_input).__name__}")
    function_input = FunctionInput.from_dict(raw_input)

    try:
        store = ResourcePairStore.from_request(request)
    except (ValueError, TypeError, AttributeError) as e:
        return fatal(rsp, f"cannot extract observed and desired composed resources: {e}")

    if not store.observed:
        logger.info("No observed resources found")
        return rsp
    if not store.desired:
        logger.info("No desired resources found")
        return rsp

    if client is None and client_factory is None:
        client_factory = default_client_factory(function_input, base_url=base_url, timeout=timeout)
    reconciler = Reconciler(client=client, function_input=function_input, client_factory=client_factory)
    report = reconciler.reconcile(store)

    resources = rsp["desired"].setdefault("resources", {})
    for name, desired in report.changed.items():
        resources[name] = desired.to_dict()

    for warning in report.warnings:
        _result(rsp, SEVERITY_WARNING, warning)

    log_summary(logger, report.summary())
    _condition(rsp, True, "Success")
    return rsp
