"""Exceptions raised while resolving external names."""

from __future__ import annotations


class ImporterError(Exception):
    """Base exception for all gl-importer errors."""


class ExtractionError(ImporterError):
    """The desired resource is missing a usable namespace/parent id or path."""


class NotFoundError(ImporterError):
    """No remote entity matched the requested path under the parent group."""

    def __init__(self, kind: str, parent_id: int, path: str, inspected: int = 0):
        self.kind = kind
        self.parent_id = parent_id
        self.path = path
        self.inspected = inspected
        super().__init__(
            f"no {kind.lower()} with path '{path}' under parent group {parent_id} "
            f"({inspected} entries inspected)"
        )


class RemoteError(ImporterError):
    """The GitLab API call failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        method: str = "",
        url: str = "",
        status_code: int | None = None,
        body: str = "",
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class AnnotationError(ImporterError):
    """Refused to write an empty external-name."""


class ConfigError(ImporterError):
    """Credentials or connection settings could not be resolved."""
