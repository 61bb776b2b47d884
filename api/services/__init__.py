"""Service modules for the API."""

from .embedding import embedding_service
from .source_store import CandidateSource, InMemorySourceStore

__all__ = [
    "embedding_service",
    "CandidateSource",
    "InMemorySourceStore",
]
