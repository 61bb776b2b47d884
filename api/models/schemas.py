"""
Data models for the candidate recommendation service.

This module contains Pydantic models for job postings, candidate facts,
indexed candidate documents, retrieval hits, ranked matches and API
responses with proper typing and validation.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class JobPosting(BaseModel):
    """Job posting as held by the source of truth."""

    id: str = Field(..., description="Unique job identifier")
    title: str = Field(..., description="Job title")
    description: str = Field("", description="Free-text job description")
    skills: List[str] = Field(
        default_factory=list, description="Structured required-skill tags"
    )
    min_experience: int = Field(
        0, ge=0, description="Minimum years of experience required"
    )


class WorkExperience(BaseModel):
    """One entry of a candidate's work history."""

    title: Optional[str] = Field(None, description="Position title")
    company: Optional[str] = Field(None, description="Employer name")
    start_date: Optional[date] = Field(None, description="Start date")
    end_date: Optional[date] = Field(None, description="End date (None if current)")


class CandidateProfile(BaseModel):
    """Candidate facts as held by the source of truth."""

    id: str = Field(..., description="Unique candidate identifier")
    name: str = Field(..., description="Candidate full name")
    email: str = Field("", description="Contact email")
    skills: List[str] = Field(default_factory=list, description="Resume skills")
    summary: str = Field("", description="Profile summary / about me")
    work_experience: List[WorkExperience] = Field(
        default_factory=list, description="Work history entries"
    )


class CandidateDocument(BaseModel):
    """Candidate projection stored in the vector index."""

    candidate_id: str = Field(..., description="Stable candidate identifier")
    name: str = Field("", description="Display name")
    email: str = Field("", description="Contact email")
    skills: List[str] = Field(default_factory=list, description="Candidate skills")
    total_experience: int = Field(0, ge=0, description="Total years of experience")
    summary: str = Field("", description="Free-text summary")
    synced_at: datetime = Field(..., description="Last sync timestamp (UTC)")


class RetrievalHit(BaseModel):
    """Single candidate returned by a semantic query."""

    candidate_id: str
    name: str = ""
    email: str = ""
    skills: List[str] = Field(default_factory=list)
    total_experience: int = 0
    summary: str = ""
    similarity: float = Field(0.0, ge=0.0, le=1.0)

    @field_validator("candidate_id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("name", "email", "summary", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("skills", mode="before")
    @classmethod
    def _none_as_no_skills(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("total_experience", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, (int, float)) and value < 0:
            return 0
        return value


class MatchScores(BaseModel):
    """Score breakdown for a ranked candidate."""

    skill: float = Field(..., description="Skill-match score")
    semantic: float = Field(..., description="Vector similarity score")
    experience_factor: float = Field(..., description="Experience multiplier")
    combined: float = Field(..., description="Final combined score")


class MatchResult(BaseModel):
    """Ranked candidate recommendation."""

    candidate_id: str = Field(..., description="Candidate identifier")
    candidate_name: str = Field("", description="Candidate name")
    email: str = Field("", description="Contact email")
    match_score: float = Field(..., ge=0.0, le=1.0, description="Combined score")
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    total_experience: int = Field(0, description="Total years of experience")
    summary: str = Field("", description="Profile summary")
    scores: Optional[MatchScores] = Field(None, description="Score breakdown")

    model_config = {"frozen": True}


class RecommendationResponse(BaseModel):
    """Response model for the job recommendation endpoint."""

    job_id: str = Field(..., description="Job posting identifier")
    job_title: str = Field(..., description="Job posting title")
    total_found: int = Field(..., description="Number of recommendations returned")
    recommendations: List[MatchResult] = Field(default_factory=list)
    processing_time_ms: float = Field(..., description="Processing time in ms")
    scoring_strategy: str = Field(..., description="Scoring strategy used")


class IngestRequest(BaseModel):
    """Request model for loading source-of-truth data."""

    jobs: List[JobPosting] = Field(
        default_factory=list, description="Job postings to load"
    )
    candidates: List[CandidateProfile] = Field(
        default_factory=list, description="Candidate profiles to load"
    )

    model_config = {"extra": "forbid"}


class IngestResponse(BaseModel):
    """Response model for data ingestion endpoint."""

    jobs_loaded: int = Field(..., description="Number of jobs loaded")
    candidates_loaded: int = Field(..., description="Number of candidates loaded")
    jobs_total: int = Field(..., description="Jobs held after loading")
    candidates_total: int = Field(..., description="Candidates held after loading")
    candidates_synced: int = Field(0, description="Candidates pushed to the index")
    candidates_failed: int = Field(0, description="Candidates that failed to sync")


class SyncResponse(BaseModel):
    """Response for single-candidate index operations."""

    candidate_id: str
    message: str


class SyncAllResponse(BaseModel):
    """Response for batch synchronisation."""

    success_count: int
    fail_count: int
    message: str


class AdminMessage(BaseModel):
    """Plain administrative acknowledgement."""

    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
