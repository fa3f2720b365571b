import hashlib
from typing import Literal, Optional

from pydantic_settings import BaseSettings


def workspace_collection_name(workspace_path: str) -> str:
    """Collection name the indexer derives from a workspace path."""
    digest = hashlib.sha256(workspace_path.encode()).hexdigest()
    return f"ws-{digest[:16]}"


class Settings(BaseSettings):

    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_https: bool = False
    qdrant_api_key: Optional[str] = None
    qdrant_collection: Optional[str] = None
    qdrant_timeout: float = 10.0

    # Used to derive the collection name when none is set
    workspace_path: Optional[str] = None

    scroll_limit: int = 1000
    search_limit: int = 10
    search_min_score: float = 0.4
    max_search_results: int = 50

    embedding_provider: Literal["openai", "sentence-transformers"] = "openai"
    embedding_base_url: str = "http://localhost:11434/v1"
    embedding_api_key: str = "ollama"
    embedding_model: str = "nomic-embed-text"

    query_prefix: str = "search_codebase: "

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def collection_name(self) -> str:
        """Configured collection, or the one derived from the workspace path."""
        if self.qdrant_collection:
            return self.qdrant_collection
        if self.workspace_path:
            return workspace_collection_name(self.workspace_path)
        raise ValueError("Set QDRANT_COLLECTION or WORKSPACE_PATH")


settings = Settings()
