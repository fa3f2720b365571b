import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def build_embedder(settings: Settings):
    """Create the embedder selected by ``embedding_provider``."""
    if settings.embedding_provider == "openai":
        from .infrastructure.embeddings.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(
            base_url=settings.embedding_base_url,
            model=settings.embedding_model,
            api_key=settings.embedding_api_key,
        )

    if settings.embedding_provider == "sentence-transformers":
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)

    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.aggregation_service import ResultAggregator
    from .core.services.search_service import SearchService
    from .infrastructure.vector_stores.qdrant_store import QdrantVectorStore

    container.reset()

    container.register(
        VectorStoreProtocol,
        lambda: QdrantVectorStore(
            collection_name=settings.collection_name,
            host=settings.qdrant_host,
            port=settings.qdrant_port,
            https=settings.qdrant_https,
            api_key=settings.qdrant_api_key,
            timeout=settings.qdrant_timeout,
        ),
        singleton=True,
    )

    container.register(
        EmbedderProtocol,
        lambda: build_embedder(settings),
        singleton=True,
    )

    container.register(ResultAggregator, ResultAggregator, singleton=True)

    container.register(
        SearchService,
        lambda: SearchService(
            vector_store=container.resolve(VectorStoreProtocol),
            embedder=container.resolve(EmbedderProtocol),
            aggregator=container.resolve(ResultAggregator),
            search_limit=settings.search_limit,
            max_search_results=settings.max_search_results,
            min_score=settings.search_min_score,
            scroll_limit=settings.scroll_limit,
            query_prefix=settings.query_prefix,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
