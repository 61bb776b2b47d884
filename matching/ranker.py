"""
Score fusion and ranking of retrieved candidates.

Each retrieval hit is scored against the required skills, weighted by
experience and combined with its vector similarity through a pluggable
scoring strategy. Results are then thresholded, ordered and truncated.
"""

import logging
import os
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel, Field

from api.models import MatchResult, MatchScores, RetrievalHit

from .skills import ExactSkillMatcher, build_skill_matcher

logger = logging.getLogger(__name__)

# Decimal places kept in combined scores
SCORE_PRECISION = 6


class ScoringWeights(BaseModel):
    """Weights and experience bounds for score fusion."""

    skill_weight: float = Field(0.5, ge=0.0, description="Skill-match weight")
    semantic_weight: float = Field(0.4, ge=0.0, description="Similarity weight")
    experience_floor: float = Field(
        0.8, ge=0.0, le=1.0, description="Factor for a candidate with no experience"
    )
    experience_cap: float = Field(
        1.2, ge=1.0, description="Maximum experience multiplier"
    )
    experience_bonus_per_year: float = Field(
        0.02, ge=0.0, description="Bonus per year above the minimum"
    )

    @classmethod
    def from_env(cls) -> "ScoringWeights":
        weights = cls(
            skill_weight=float(os.getenv("SKILL_WEIGHT", "0.5")),
            semantic_weight=float(os.getenv("SEMANTIC_WEIGHT", "0.4")),
        )
        if weights.skill_weight + weights.semantic_weight > 1.0:
            logger.warning(
                f"Skill and semantic weights sum to "
                f"{weights.skill_weight + weights.semantic_weight:.2f} (> 1.0); "
                f"scores will saturate at 1.0"
            )
        return weights


def experience_factor(
    candidate_years: int, min_years: int, weights: Optional[ScoringWeights] = None
) -> float:
    """
    Compute the experience multiplier for a candidate.

    Args:
        candidate_years: Candidate's total years of experience
        min_years: Years required by the job
        weights: Experience bounds

    Returns:
        Multiplier between the experience floor and cap
    """
    weights = weights or ScoringWeights()
    candidate_years = max(0, candidate_years)

    if min_years <= 0:
        return 1.0

    if candidate_years >= min_years:
        return min(
            weights.experience_cap,
            1.0 + (candidate_years - min_years) * weights.experience_bonus_per_year,
        )

    return weights.experience_floor + (candidate_years / min_years) * (
        1.0 - weights.experience_floor
    )


class ScoringStrategy(Protocol):
    """Combines component scores into the final match score."""

    name: str
    applies_experience: bool

    def combine(
        self, skill_score: float, semantic_score: float, exp_factor: float
    ) -> float: ...


class WeightedFusionStrategy:
    """Weighted skill + semantic score, multiplied by the experience factor."""

    name = "weighted_fusion"
    applies_experience = True

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def combine(
        self, skill_score: float, semantic_score: float, exp_factor: float
    ) -> float:
        base = (
            skill_score * self.weights.skill_weight
            + semantic_score * self.weights.semantic_weight
        )
        return round(min(1.0, max(0.0, base * exp_factor)), SCORE_PRECISION)


class SkillOverlapStrategy:
    """Skill-match score alone, for backends that do no vectorization."""

    name = "skill_overlap"
    applies_experience = False

    def combine(
        self, skill_score: float, semantic_score: float, exp_factor: float
    ) -> float:
        return round(min(1.0, max(0.0, skill_score)), SCORE_PRECISION)


def build_strategy(
    name: Optional[str] = None, weights: Optional[ScoringWeights] = None
) -> ScoringStrategy:
    """
    Build the scoring strategy named by ``name`` or SCORING_STRATEGY.

    Raises:
        ValueError: If the strategy name is unknown
    """
    name = (name or os.getenv("SCORING_STRATEGY", "weighted_fusion")).lower()
    if name == "weighted_fusion":
        return WeightedFusionStrategy(weights or ScoringWeights.from_env())
    if name == "skill_overlap":
        return SkillOverlapStrategy()
    raise ValueError(
        f"Unknown scoring strategy: {name}. Use 'weighted_fusion' or 'skill_overlap'"
    )


class Ranker:
    """
    Scores, filters, orders and truncates retrieval hits.
    """

    def __init__(
        self,
        matcher: Optional[ExactSkillMatcher] = None,
        strategy: Optional[ScoringStrategy] = None,
        weights: Optional[ScoringWeights] = None,
    ):
        self.matcher = matcher or build_skill_matcher()
        self.weights = weights or getattr(strategy, "weights", None) or ScoringWeights()
        self.strategy = strategy or WeightedFusionStrategy(self.weights)

    def score_hit(
        self, hit: RetrievalHit, required_skills: Sequence[str], min_experience: int
    ) -> MatchResult:
        """
        Build the match result for one hit.

        Matched and missing skills come from the same matcher pass as the
        skill score.
        """
        skill_match = self.matcher.evaluate(required_skills, hit.skills)
        factor = (
            experience_factor(hit.total_experience, min_experience, self.weights)
            if getattr(self.strategy, "applies_experience", True)
            else 1.0
        )
        combined = self.strategy.combine(skill_match.score, hit.similarity, factor)

        logger.debug(
            f"Candidate {hit.candidate_id} - semantic: {hit.similarity:.2f}, "
            f"skill: {skill_match.score:.2f}, exp factor: {factor:.2f}, "
            f"combined: {combined:.2f}"
        )

        return MatchResult(
            candidate_id=hit.candidate_id,
            candidate_name=hit.name,
            email=hit.email,
            match_score=combined,
            matched_skills=skill_match.matched,
            missing_skills=skill_match.missing,
            total_experience=hit.total_experience,
            summary=hit.summary,
            scores=MatchScores(
                skill=skill_match.score,
                semantic=hit.similarity,
                experience_factor=factor,
                combined=combined,
            ),
        )

    def rank(
        self,
        hits: Sequence[RetrievalHit],
        required_skills: Sequence[str],
        min_experience: int,
        limit: int,
        threshold: float,
    ) -> List[MatchResult]:
        """
        Rank retrieval hits for a job.

        Args:
            hits: Retrieval hits in retrieval order
            required_skills: Required skills of the job
            min_experience: Minimum years of experience for the job
            limit: Maximum number of results
            threshold: Inclusive lower bound on the combined score

        Returns:
            Results ordered by score, then experience, both descending
        """
        scored = []
        for hit in hits:
            try:
                scored.append(self.score_hit(hit, required_skills, min_experience))
            except Exception as e:
                logger.warning(f"Skipping candidate {hit.candidate_id}: {e}")

        kept = [result for result in scored if result.match_score >= threshold]
        logger.info(
            f"Filtered from {len(scored)} to {len(kept)} candidates meeting "
            f"threshold {threshold:.2f}"
        )

        # list.sort is stable, so exact ties keep retrieval order
        kept.sort(key=lambda r: (-r.match_score, -r.total_experience))

        return kept[: max(0, limit)]
