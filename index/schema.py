"""
Candidate collection schema management for Weaviate.
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

import weaviate
from weaviate.classes.config import Configure, DataType, Property, VectorDistances
from weaviate.exceptions import WeaviateBaseError

from api.exceptions import SchemaError

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "CandidateProfile"

VECTORIZED_PROPERTIES = ["skills", "summary"]

VECTORIZERS = ("text2vec-transformers", "text2vec-weaviate", "self_provided")


def candidate_properties() -> List[Property]:
    """Property list of the candidate collection; only skills and summary are vectorized."""

    def prop(name: str, data_type: DataType, description: str) -> Property:
        return Property(
            name=name,
            data_type=data_type,
            description=description,
            skip_vectorization=name not in VECTORIZED_PROPERTIES,
            vectorize_property_name=False,
        )

    return [
        prop("candidate_id", DataType.TEXT, "Unique candidate identifier"),
        prop("name", DataType.TEXT, "Candidate full name"),
        prop("email", DataType.TEXT, "Candidate email address"),
        prop("skills", DataType.TEXT_ARRAY, "Candidate skills, vectorized"),
        prop("total_experience", DataType.INT, "Total years of experience"),
        prop("summary", DataType.TEXT, "Profile summary, vectorized"),
        prop("synced_at", DataType.DATE, "Last sync timestamp"),
    ]


class SchemaManager:
    """
    Ensures the candidate collection exists with the expected definition.
    """

    def __init__(
        self,
        client: weaviate.WeaviateClient,
        collection_name: Optional[str] = None,
        vectorizer: Optional[str] = None,
        recreate_wait: Optional[float] = None,
        poll_interval: float = 0.25,
    ):
        """
        Initialize the schema manager.

        Args:
            client: Connected Weaviate client
            collection_name: Candidate collection name (CANDIDATE_COLLECTION)
            vectorizer: One of VECTORIZERS (WEAVIATE_VECTORIZER)
            recreate_wait: Max seconds to wait for a deletion to settle
                (SCHEMA_RECREATE_WAIT)
            poll_interval: Seconds between existence checks while waiting
        """
        self.client = client
        self.collection_name = collection_name or os.getenv(
            "CANDIDATE_COLLECTION", DEFAULT_COLLECTION
        )
        self.vectorizer = vectorizer or os.getenv(
            "WEAVIATE_VECTORIZER", "text2vec-transformers"
        )
        if self.vectorizer not in VECTORIZERS:
            raise ValueError(
                f"Unknown vectorizer: {self.vectorizer}. "
                f"Use one of {', '.join(VECTORIZERS)}"
            )
        self.recreate_wait = (
            recreate_wait
            if recreate_wait is not None
            else float(os.getenv("SCHEMA_RECREATE_WAIT", "2.0"))
        )
        self.poll_interval = poll_interval

    @property
    def self_provided(self) -> bool:
        return self.vectorizer == "self_provided"

    def _vector_config(self):
        index_config = Configure.VectorIndex.hnsw(
            distance_metric=VectorDistances.COSINE
        )
        if self.vectorizer == "self_provided":
            return Configure.Vectors.self_provided(vector_index_config=index_config)
        if self.vectorizer == "text2vec-weaviate":
            return Configure.Vectors.text2vec_weaviate(
                source_properties=VECTORIZED_PROPERTIES,
                vectorize_collection_name=False,
                vector_index_config=index_config,
            )
        return Configure.Vectors.text2vec_transformers(
            source_properties=VECTORIZED_PROPERTIES,
            vectorize_collection_name=False,
            vector_index_config=index_config,
        )

    def _create(self) -> None:
        try:
            self.client.collections.create(
                name=self.collection_name,
                description="Candidate profiles with skills and experience "
                "for semantic matching",
                properties=candidate_properties(),
                vector_config=self._vector_config(),
            )
        except WeaviateBaseError as e:
            raise SchemaError(
                f"Failed to create collection {self.collection_name}: {e}"
            ) from e

        logger.info(
            f"Created {self.collection_name} collection with {self.vectorizer} "
            f"vectorization"
        )

    def ensure_schema(self) -> bool:
        """
        Create the candidate collection if it does not exist.

        Failures are logged and leave the index untouched.

        Returns:
            True if the collection was created by this call
        """
        try:
            if self.client.collections.exists(self.collection_name):
                return False
            logger.info(f"Creating Weaviate collection {self.collection_name}")
            self._create()
            return True
        except (SchemaError, WeaviateBaseError) as e:
            logger.error(f"Error ensuring Weaviate schema: {e}")
            return False

    def _wait_until_deleted(self) -> None:
        deadline = time.monotonic() + self.recreate_wait
        while self.client.collections.exists(self.collection_name):
            if time.monotonic() >= deadline:
                raise SchemaError(
                    f"Collection {self.collection_name} still present "
                    f"{self.recreate_wait:.1f}s after deletion"
                )
            time.sleep(self.poll_interval)

    def recreate_schema(self) -> None:
        """
        Drop and recreate the candidate collection.

        Destructive: every candidate has to be re-synced afterwards.

        Raises:
            SchemaError: If the collection could not be recreated
        """
        logger.info(f"Recreating Weaviate collection {self.collection_name}")

        try:
            self.client.collections.delete(self.collection_name)
            logger.info(f"Deleted existing {self.collection_name} collection")
        except WeaviateBaseError as e:
            logger.warning(
                f"Could not delete {self.collection_name} (might not exist): {e}"
            )

        try:
            self._wait_until_deleted()
            self._create()
        except WeaviateBaseError as e:
            raise SchemaError(
                f"Failed to recreate collection {self.collection_name}: {e}"
            ) from e

        logger.info(
            f"Collection {self.collection_name} recreated. Please re-sync candidates."
        )

    def describe_schema(self) -> Dict[str, Any]:
        """
        Return the current collection configuration.

        Returns:
            Collection configuration as a dictionary, or ``{}`` if absent
        """
        if not self.client.collections.exists(self.collection_name):
            return {}
        collection = self.client.collections.get(self.collection_name)
        return collection.config.get().to_dict()
