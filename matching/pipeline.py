"""
Candidate recommendation pipeline.

Resolves a job's required skills, retrieves semantically close candidates
from the vector index and ranks them with the configured scoring strategy.
"""

import logging
import time
from typing import List, Optional, Protocol, Sequence

from api.models import RecommendationResponse, RetrievalHit
from api.services.source_store import CandidateSource

from .ranker import Ranker

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 10
DEFAULT_MIN_MATCH_SCORE = 0.5


class Retriever(Protocol):
    def semantic_search(
        self, query_terms: Sequence[str], limit: int
    ) -> List[RetrievalHit]: ...


class RecommendationPipeline:
    """
    Orchestrates skill resolution, retrieval and ranking for one job.
    """

    def __init__(self, source: CandidateSource, retriever: Retriever, ranker: Ranker):
        self.source = source
        self.retriever = retriever
        self.ranker = ranker

    def get_recommendations(
        self,
        job_id: str,
        max_candidates: Optional[int] = None,
        min_match_score: Optional[float] = None,
    ) -> RecommendationResponse:
        """
        Recommend candidates for a job posting.

        Args:
            job_id: Job posting identifier
            max_candidates: Maximum recommendations (default 10)
            min_match_score: Inclusive score threshold in [0, 1] (default 0.5)

        Returns:
            RecommendationResponse, empty when the job yields no required skills

        Raises:
            NotFoundError: If the job does not exist
            ValueError: If the limits are out of range
        """
        start_time = time.perf_counter()

        limit = DEFAULT_MAX_CANDIDATES if max_candidates is None else max_candidates
        threshold = (
            DEFAULT_MIN_MATCH_SCORE if min_match_score is None else min_match_score
        )
        if limit < 1:
            raise ValueError("max_candidates must be at least 1")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("min_match_score must be between 0.0 and 1.0")

        job = self.source.get_job(job_id)
        required_skills = self.source.get_job_required_skills(job_id)

        if not required_skills:
            logger.warning(f"No skills or description text found for job {job_id}")
            return self._response(job_id, job.title, [], start_time)

        min_experience = self.source.get_job_min_experience(job_id)
        logger.info(
            f"Searching candidates for job {job_id} with {len(required_skills)} "
            f"required skills: {', '.join(required_skills)}"
        )

        hits = self.retriever.semantic_search(required_skills, limit)
        recommendations = self.ranker.rank(
            hits, required_skills, min_experience, limit, threshold
        )

        response = self._response(job_id, job.title, recommendations, start_time)
        logger.info(
            f"Found {response.total_found} recommended candidates for job "
            f"'{job.title}' in {response.processing_time_ms:.2f}ms"
        )
        return response

    def _response(self, job_id, job_title, recommendations, start_time):
        return RecommendationResponse(
            job_id=job_id,
            job_title=job_title,
            total_found=len(recommendations),
            recommendations=recommendations,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
            scoring_strategy=self.ranker.strategy.name,
        )
