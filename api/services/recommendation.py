"""
Recommendation service wrapper.

This module wires the Weaviate index components, the source store and the
ranking pipeline together and exposes them to the API layer. Blocking
Weaviate calls run in the default executor.
"""

import asyncio
import logging
import os
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

import weaviate
from dotenv import load_dotenv

from api.models import (
    CandidateDocument,
    CandidateProfile,
    JobPosting,
    RecommendationResponse,
)
from index.retrieval import RetrievalClient
from index.schema import SchemaManager
from index.syncer import IndexSyncer
from index.weaviate_client import connect_weaviate
from matching.pipeline import RecommendationPipeline
from matching.ranker import Ranker, build_strategy
from matching.skills import build_skill_matcher

from .embedding import embedding_service
from .source_store import InMemorySourceStore

load_dotenv()

logger = logging.getLogger(__name__)


class RecommendationService:
    """
    Service facade for candidate recommendations and index maintenance.
    """

    def __init__(self, source: Optional[InMemorySourceStore] = None):
        """Initialize the service; no connection is made until initialize()."""
        self.source = source or InMemorySourceStore()
        self.client: Optional[weaviate.WeaviateClient] = None
        self.schema: Optional[SchemaManager] = None
        self.syncer: Optional[IndexSyncer] = None
        self.retrieval: Optional[RetrievalClient] = None
        self.pipeline: Optional[RecommendationPipeline] = None
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    async def initialize(self) -> None:
        """
        Connect to Weaviate, ensure the candidate collection and load seed data.
        """
        logger.info("Initializing recommendation service")

        client = await self._run(connect_weaviate)
        await self._run(self.configure, client)
        await self._run(self.schema.ensure_schema)

        jobs_file = os.getenv("JOBS_FILE")
        candidates_file = os.getenv("CANDIDATES_FILE")
        if jobs_file or candidates_file:
            jobs, candidates = self.source.load_json(
                jobs_file or "", candidates_file or ""
            )
            logger.info(f"Loaded {jobs} jobs and {candidates} candidates from files")

        logger.info(
            f"Recommendation service initialized with "
            f"{self.pipeline.ranker.strategy.name} scoring"
        )

    def configure(self, client: weaviate.WeaviateClient) -> None:
        """Build the index and ranking components on top of a connected client."""
        self.client = client
        self.schema = SchemaManager(client)

        embedder = None
        if self.schema.self_provided:
            if not embedding_service.is_initialized():
                embedding_service.initialize()
            embedder = embedding_service.encode
            logger.info(
                f"Using self-provided {embedding_service.get_embedding_dim()}-dim "
                f"vectors from {embedding_service.model_name}"
            )

        self.retrieval = RetrievalClient(client, self.schema, embedder=embedder)
        self.syncer = IndexSyncer(client, self.source, self.schema, embedder=embedder)
        self.pipeline = RecommendationPipeline(
            self.source,
            self.retrieval,
            Ranker(matcher=build_skill_matcher(), strategy=build_strategy()),
        )

    def is_initialized(self) -> bool:
        return self.pipeline is not None

    def _require(self) -> None:
        if not self.is_initialized():
            raise RuntimeError(
                "Recommendation service not initialized. Call initialize() first."
            )

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def get_recommendations(
        self,
        job_id: str,
        max_candidates: Optional[int] = None,
        min_match_score: Optional[float] = None,
    ) -> RecommendationResponse:
        """
        Recommend candidates for a job within the request deadline.

        Raises:
            NotFoundError: If the job does not exist
            asyncio.TimeoutError: If the deadline is exceeded
        """
        self._require()
        return await asyncio.wait_for(
            self._run(
                self.pipeline.get_recommendations,
                job_id,
                max_candidates,
                min_match_score,
            ),
            timeout=self.request_timeout,
        )

    async def sync_candidate(self, candidate_id: str) -> CandidateDocument:
        self._require()
        return await self._run(self.syncer.sync, candidate_id)

    async def sync_all_candidates(self) -> Tuple[int, int]:
        self._require()
        return await self._run(self.syncer.sync_all)

    async def delete_candidate(self, candidate_id: str) -> bool:
        self._require()
        return await self._run(self.syncer.delete, candidate_id)

    async def recreate_index(self) -> None:
        self._require()
        await self._run(self.schema.recreate_schema)

    async def describe_index(self) -> Dict[str, Any]:
        self._require()
        return await self._run(self.schema.describe_schema)

    async def ingest_data(
        self,
        jobs: List[JobPosting],
        candidates: List[CandidateProfile],
        sync: bool = False,
    ) -> Dict[str, int]:
        """
        Load jobs and candidates into the source store.

        Args:
            jobs: Job postings
            candidates: Candidate profiles
            sync: Also push the loaded candidates to the index

        Returns:
            Dictionary with ingestion statistics
        """
        if sync:
            self._require()

        jobs_loaded = self.source.upsert_jobs(jobs)
        candidates_loaded = self.source.upsert_candidates(candidates)

        synced = failed = 0
        if sync and candidates:
            synced, failed = await self._run(
                self.syncer.sync_many, [candidate.id for candidate in candidates]
            )

        jobs_total, candidates_total = self.source.counts()
        return {
            "jobs_loaded": jobs_loaded,
            "candidates_loaded": candidates_loaded,
            "jobs_total": jobs_total,
            "candidates_total": candidates_total,
            "candidates_synced": synced,
            "candidates_failed": failed,
        }

    def close(self) -> None:
        """Close the Weaviate client connection."""
        if self.client:
            self.client.close()
            logger.info("Weaviate connection closed")


# Global recommendation service instance
recommendation_service = RecommendationService()
