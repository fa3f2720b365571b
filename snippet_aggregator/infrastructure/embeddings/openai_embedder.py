import logging

import numpy as np
from openai import OpenAI

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    """Embedder for any OpenAI-compatible embeddings API (OpenAI, Ollama)."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "nomic-embed-text",
        api_key: str = "ollama",
        timeout: float = 30.0,
    ):
        """Initialize embeddings client.

        Args:
            base_url: API base URL.
            model: Embedding model name.
            api_key: API key (any non-empty value for Ollama).
            timeout: Request timeout in seconds.
        """
        self._client = OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        self._model = model

    def encode(self, text: str) -> np.ndarray:
        response = self._client.embeddings.create(model=self._model, input=[text])
        embedding = np.asarray(response.data[0].embedding, dtype=np.float32)
        logger.debug(f"Embedded query with {self._model} (dim={embedding.shape[0]})")
        return embedding
