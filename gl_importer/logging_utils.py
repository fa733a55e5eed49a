"""Logging utilities for gl-importer.

Per-resource outcomes and the end-of-pass summary travel on the log record
(``resolution_result`` and ``summary`` extras). In JSON mode they are rendered
as machine-readable lines; in text mode they read as one line each on stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping

from gl_importer.models import ResolutionOutcome, ResolutionResult

LOGGER_NAME = "gl-importer"

OUTCOME_ICONS = {
    ResolutionOutcome.RESOLVED_REMOTELY: "✓",
    ResolutionOutcome.COPIED_FROM_OBSERVED: "·",
    ResolutionOutcome.COPIED_FROM_DESIRED: "·",
    ResolutionOutcome.SKIPPED: "→",
    ResolutionOutcome.FAILED: "✗",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that can emit JSON lines when configured."""

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        if not self.json_mode:
            return f"[{record.levelname:<7}] {record.getMessage()}"

        result = getattr(record, "resolution_result", None)
        if result is not None:
            return json.dumps(result.to_dict())
        summary = getattr(record, "summary", None)
        if summary is not None:
            return json.dumps({"summary": dict(summary)})
        return json.dumps({"level": record.levelname, "message": record.getMessage()})


def describe_result(result: ResolutionResult) -> str:
    line = f"{OUTCOME_ICONS.get(result.outcome, '?')} [{result.kind}] {result.name}: {result.outcome.value}"
    if result.external_name:
        line += f" = {result.external_name}"
    if result.detail:
        line += f" ({result.detail})"
    return line


def log_result(logger: logging.Logger, result: ResolutionResult) -> None:
    """Log one resolution outcome; failures are warnings."""
    level = logging.WARNING if result.outcome == ResolutionOutcome.FAILED else logging.INFO
    logger.log(level, describe_result(result), extra={"resolution_result": result})


def log_summary(logger: logging.Logger, counts: Mapping[str, int]) -> None:
    """Log the end-of-pass counters, e.g. ``Done: 2 resources, 1 resolved``."""
    text = ", ".join(f"{value} {key}" for key, value in counts.items())
    logger.info(f"Done: {text}", extra={"summary": counts})


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # main() may run several times in one process
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.addHandler(handler)
    return logger
