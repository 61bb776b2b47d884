"""API models for the candidate recommendation service."""

from .schemas import (
    AdminMessage,
    CandidateDocument,
    CandidateProfile,
    IngestRequest,
    IngestResponse,
    JobPosting,
    MatchResult,
    MatchScores,
    RecommendationResponse,
    RetrievalHit,
    SyncAllResponse,
    SyncResponse,
    WorkExperience,
)

__all__ = [
    "JobPosting",
    "WorkExperience",
    "CandidateProfile",
    "CandidateDocument",
    "RetrievalHit",
    "MatchScores",
    "MatchResult",
    "RecommendationResponse",
    "IngestRequest",
    "IngestResponse",
    "SyncResponse",
    "SyncAllResponse",
    "AdminMessage",
]
