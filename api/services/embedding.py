"""
Embedding service using sentence-transformers.

This module provides client-side text embeddings for the candidate index
when Weaviate is configured with self-provided vectors. Only the skills and
summary of a candidate are embedded.
"""

import logging
import os
from typing import List, Optional, Sequence

import numpy as np
import torch
from dotenv import load_dotenv
from sentence_transformers import SentenceTransformer

load_dotenv()

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Service for generating text embeddings using sentence-transformers.
    """

    def __init__(
        self, model_name: str = "all-MiniLM-L6-v2", device: Optional[str] = None
    ):
        """
        Initialize the embedding service.

        Args:
            model_name: Name of the sentence-transformer model to use
            device: Device to run the model on ('cuda', 'cpu', or None for auto)
        """
        self.model_name = model_name
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.model: Optional[SentenceTransformer] = None
        self.embedding_dim: int = 384

    def initialize(self) -> None:
        """
        Load the embedding model.

        Raises:
            RuntimeError: If model initialization fails
        """
        try:
            logger.info(f"Loading embedding model: {self.model_name} on {self.device}")
            self.model = SentenceTransformer(self.model_name, device=self.device)
            self.embedding_dim = len(self.encode("test"))
        except Exception as e:
            self.model = None
            raise RuntimeError(f"Embedding model initialization failed: {e}")

    def encode(self, text: str) -> List[float]:
        """
        Generate a normalized embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Embedding as a list of floats, ready for Weaviate

        Raises:
            RuntimeError: If model is not initialized or encoding fails
        """
        if self.model is None:
            raise RuntimeError(
                "Embedding model not initialized. Call initialize() first."
            )

        try:
            embedding = self.model.encode(
                text, convert_to_numpy=True, normalize_embeddings=True
            )
            return np.asarray(embedding, dtype=np.float32).tolist()
        except Exception as e:
            raise RuntimeError(f"Text encoding failed: {e}")

    def get_embedding_dim(self) -> int:
        return self.embedding_dim

    def is_initialized(self) -> bool:
        return self.model is not None


def create_document_text(skills: Sequence[str], summary: str) -> str:
    """
    Create the embedded text of a candidate document.

    Args:
        skills: Candidate skills
        summary: Candidate summary

    Returns:
        Skills followed by the summary
    """
    return f"{' '.join(skills)} {summary or ''}".strip()


embedding_service = EmbeddingService(
    model_name=os.getenv("EMBEDDING_MODEL", "all-MiniLM-L6-v2")
)
