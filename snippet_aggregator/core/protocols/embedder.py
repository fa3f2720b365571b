"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable
import numpy as np


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    def encode(self, text: str) -> np.ndarray:
        """Encode a query text to an embedding.

        Args:
            text: Text to encode.

        Returns:
            One-dimensional embedding vector.
        """
        ...
