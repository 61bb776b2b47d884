"""
Exception types for the recommendation service.
"""

from typing import Any, Dict, Optional


class RecommendationError(Exception):
    """Base exception for recommendation and indexing failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(RecommendationError):
    """Raised when a job or candidate does not exist in the source of truth."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            f"{kind} {identifier} not found", {"kind": kind, "id": identifier}
        )


class SyncError(RecommendationError):
    """Raised when a candidate document cannot be written to or removed from the index."""


class SchemaError(RecommendationError):
    """Raised when the candidate collection cannot be created or recreated."""
