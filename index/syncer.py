"""
Projection of candidate facts into the Weaviate candidate collection.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple

import weaviate
from weaviate.exceptions import WeaviateBaseError
from weaviate.util import generate_uuid5

from api.exceptions import SyncError
from api.models import CandidateDocument, CandidateProfile, WorkExperience
from api.services.embedding import create_document_text
from api.services.source_store import CandidateSource

from .schema import SchemaManager

logger = logging.getLogger(__name__)


def whole_years_between(start: date, end: date) -> int:
    """Number of complete years from ``start`` to ``end`` (never negative)."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return max(0, years)


def total_experience_years(entries: Iterable[WorkExperience]) -> int:
    """
    Sum the whole-year spans of a work history.

    Entries without both a start and an end date count as zero.
    """
    return sum(
        whole_years_between(entry.start_date, entry.end_date)
        for entry in entries
        if entry.start_date is not None and entry.end_date is not None
    )


def document_uuid(candidate_id: str) -> str:
    """Deterministic Weaviate object id for a candidate."""
    return str(generate_uuid5(str(candidate_id)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IndexSyncer:
    """
    Keeps candidate documents in the vector index in line with the source of truth.

    Every sync deletes the previous object and inserts a fresh one so that no
    embedding of an older skill set survives.
    """

    def __init__(
        self,
        client: weaviate.WeaviateClient,
        source: CandidateSource,
        schema: SchemaManager,
        embedder: Optional[Callable[[str], List[float]]] = None,
        max_concurrency: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the syncer.

        Args:
            client: Connected Weaviate client
            source: Source of candidate facts
            schema: Schema manager of the candidate collection
            embedder: Text -> vector function, required for self-provided vectors
            max_concurrency: Parallel syncs in sync_all (SYNC_MAX_CONCURRENCY)
            clock: Timestamp source for ``synced_at``
        """
        self.client = client
        self.source = source
        self.schema = schema
        self.embedder = embedder
        self.max_concurrency = max(
            1,
            max_concurrency
            if max_concurrency is not None
            else int(os.getenv("SYNC_MAX_CONCURRENCY", "1")),
        )
        self.clock = clock

        if schema.self_provided and embedder is None:
            raise ValueError("Self-provided vectors require an embedder")

    def _collection(self):
        return self.client.collections.get(self.schema.collection_name)

    def build_document(self, candidate: CandidateProfile) -> CandidateDocument:
        return CandidateDocument(
            candidate_id=candidate.id,
            name=candidate.name,
            email=candidate.email,
            skills=list(candidate.skills),
            total_experience=total_experience_years(candidate.work_experience),
            summary=candidate.summary or "",
            synced_at=self.clock(),
        )

    def sync(self, candidate_id: str) -> CandidateDocument:
        """
        Write the current facts of one candidate to the index.

        Args:
            candidate_id: Candidate identifier

        Returns:
            The document that was written

        Raises:
            NotFoundError: If the candidate does not exist
            SyncError: If the document could not be written
        """
        candidate = self.source.get_candidate_facts(candidate_id)
        document = self.build_document(candidate)
        object_id = document_uuid(candidate_id)

        logger.info(
            f"Syncing candidate {candidate_id} with {len(document.skills)} skills: "
            f"{', '.join(document.skills)}"
        )

        vector = None
        if self.embedder is not None:
            try:
                vector = self.embedder(
                    create_document_text(document.skills, document.summary)
                )
            except RuntimeError as e:
                raise SyncError(f"Failed to embed candidate {candidate_id}: {e}") from e

        collection = self._collection()

        try:
            if collection.data.delete_by_id(object_id):
                logger.info(f"Deleted existing index entry for candidate {candidate_id}")
        except WeaviateBaseError as e:
            logger.debug(f"No existing entry for candidate {candidate_id}: {e}")

        try:
            collection.data.insert(
                properties=document.model_dump(), uuid=object_id, vector=vector
            )
        except WeaviateBaseError as e:
            raise SyncError(
                f"Failed to sync candidate {candidate_id}: {e}",
                {"candidate_id": candidate_id},
            ) from e

        logger.info(f"Synced candidate {candidate_id} to Weaviate")
        return document

    def _sync_counted(self, candidate_id: str) -> bool:
        try:
            self.sync(candidate_id)
            return True
        except Exception as e:
            logger.error(f"Failed to sync candidate {candidate_id}: {e}")
            return False

    def sync_all(self) -> Tuple[int, int]:
        """
        Sync every candidate known to the source of truth.

        Returns:
            Tuple (success_count, fail_count)
        """
        return self.sync_many(self.source.list_all_candidate_ids())

    def sync_many(self, candidate_ids: List[str]) -> Tuple[int, int]:
        """
        Sync a batch of candidates, ensuring the collection exists first.

        Individual failures are counted and never abort the batch.

        Args:
            candidate_ids: Candidates to sync

        Returns:
            Tuple (success_count, fail_count)
        """
        self.schema.ensure_schema()

        logger.info(
            f"Starting sync of {len(candidate_ids)} candidates "
            f"(concurrency {self.max_concurrency})"
        )

        if self.max_concurrency == 1:
            outcomes = [self._sync_counted(cid) for cid in candidate_ids]
        else:
            with ThreadPoolExecutor(max_workers=self.max_concurrency) as pool:
                outcomes = list(pool.map(self._sync_counted, candidate_ids))

        success_count = sum(1 for ok in outcomes if ok)
        fail_count = len(outcomes) - success_count

        logger.info(f"Sync completed: {success_count} succeeded, {fail_count} failed")
        return success_count, fail_count

    def delete(self, candidate_id: str) -> bool:
        """
        Remove a candidate's document from the index.

        Returns:
            True if a document was deleted, False if none existed

        Raises:
            SyncError: If the index rejected the deletion
        """
        try:
            deleted = bool(
                self._collection().data.delete_by_id(document_uuid(candidate_id))
            )
        except WeaviateBaseError as e:
            raise SyncError(
                f"Failed to delete candidate {candidate_id}: {e}",
                {"candidate_id": candidate_id},
            ) from e

        if deleted:
            logger.info(f"Deleted candidate {candidate_id} from Weaviate")
        else:
            logger.info(f"Candidate {candidate_id} was not in the index")
        return deleted
