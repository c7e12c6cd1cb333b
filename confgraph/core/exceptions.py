"""
Exception taxonomy for the analytics pipeline.

InputError and NotFoundError abort the current stage and reach the caller.
PersistenceError wraps storage failures; connection writes catch and log it.
"""
from typing import Any


class ConfGraphError(Exception):
    """Root exception for all ConfGraph errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class InputError(ConfGraphError):
    """Caller-supplied data or parameters cannot be processed."""


class EmptyCorpusError(InputError):
    """No keywords were available to vectorize."""

    def __init__(self, message: str = "No keywords found in corpus"):
        super().__init__(message)


class NotFoundError(ConfGraphError):
    """A requested artifact (e.g. a cluster id) does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} {identifier} not found", context={"kind": kind, "id": identifier})
        self.kind = kind
        self.identifier = identifier


class PersistenceError(ConfGraphError):
    """A read or write against the analytics store failed."""

    def __init__(self, operation: str, cause: Exception | None = None):
        detail = f"{operation} failed"
        if cause is not None:
            detail += f": {cause}"
        super().__init__(detail, context={"operation": operation})
        self.operation = operation
        if cause is not None:
            self.__cause__ = cause
