"""
Semantic candidate retrieval from Weaviate.
"""

import logging
import os
from typing import Callable, List, Optional, Sequence

import weaviate
from pydantic import ValidationError
from weaviate.classes.query import MetadataQuery

from api.models import RetrievalHit

from .schema import SchemaManager

logger = logging.getLogger(__name__)

RETURN_PROPERTIES = [
    "candidate_id",
    "name",
    "email",
    "skills",
    "total_experience",
    "summary",
]


def similarity_from_metadata(metadata) -> float:
    """
    Extract a [0, 1] similarity from Weaviate result metadata.

    Certainty is used when present, otherwise it is derived from the cosine
    distance.
    """
    certainty = getattr(metadata, "certainty", None)
    if certainty is None:
        distance = getattr(metadata, "distance", None)
        if distance is None:
            return 0.0
        certainty = 1.0 - float(distance) / 2.0
    return min(max(float(certainty), 0.0), 1.0)


def decode_hits(objects) -> List[RetrievalHit]:
    """
    Decode Weaviate result objects into retrieval hits.

    Objects that do not have the expected shape are skipped.

    Args:
        objects: ``response.objects`` of a Weaviate query

    Returns:
        Retrieval hits in result order
    """
    hits = []
    for obj in objects or []:
        try:
            properties = dict(obj.properties)
            properties["similarity"] = similarity_from_metadata(obj.metadata)
            hits.append(RetrievalHit.model_validate(properties))
        except (AttributeError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Skipping malformed search result: {e}")
    return hits


class RetrievalClient:
    """
    Issues nearest-neighbour queries against the candidate collection.
    """

    def __init__(
        self,
        client: weaviate.WeaviateClient,
        schema: SchemaManager,
        embedder: Optional[Callable[[str], List[float]]] = None,
        overfetch: Optional[int] = None,
        certainty: Optional[float] = None,
    ):
        """
        Initialize the retrieval client.

        Args:
            client: Connected Weaviate client
            schema: Schema manager of the candidate collection
            embedder: Text -> vector function for self-provided vectors
            overfetch: Hits requested per wanted result (RETRIEVAL_OVERFETCH)
            certainty: Similarity floor bounding result volume
                (RETRIEVAL_CERTAINTY)
        """
        self.client = client
        self.schema = schema
        self.embedder = embedder
        self.overfetch = max(
            1,
            overfetch
            if overfetch is not None
            else int(os.getenv("RETRIEVAL_OVERFETCH", "3")),
        )
        self.certainty = (
            certainty
            if certainty is not None
            else float(os.getenv("RETRIEVAL_CERTAINTY", "0.3"))
        )

        if schema.self_provided and embedder is None:
            raise ValueError("Self-provided vectors require an embedder")

    def semantic_search(
        self, query_terms: Sequence[str], limit: int
    ) -> List[RetrievalHit]:
        """
        Find candidates semantically close to the query terms.

        Query errors are logged and yield an empty list.

        Args:
            query_terms: Required skills or keywords
            limit: Number of results the caller will finally keep

        Returns:
            Up to ``limit * overfetch`` hits, closest first
        """
        query = " ".join(term for term in query_terms if term).strip()
        if not query or limit <= 0:
            return []

        fetch = limit * self.overfetch
        logger.info(f"Searching Weaviate with semantic query: '{query}' (limit: {fetch})")

        try:
            collection = self.client.collections.get(self.schema.collection_name)
            metadata = MetadataQuery(certainty=True, distance=True)

            if self.embedder is not None:
                response = collection.query.near_vector(
                    near_vector=self.embedder(query),
                    certainty=self.certainty,
                    limit=fetch,
                    return_properties=RETURN_PROPERTIES,
                    return_metadata=metadata,
                )
            else:
                response = collection.query.near_text(
                    query=query,
                    certainty=self.certainty,
                    limit=fetch,
                    return_properties=RETURN_PROPERTIES,
                    return_metadata=metadata,
                )

            hits = decode_hits(response.objects)

        except Exception as e:
            logger.error(f"Weaviate semantic search failed: {e}")
            return []

        logger.info(f"Semantic search returned {len(hits)} candidates")
        return hits
