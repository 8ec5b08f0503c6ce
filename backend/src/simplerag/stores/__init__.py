from typing import TYPE_CHECKING, Any, Optional

from simplerag.adapters import BaseEmbedder
from .base import BaseVectorStore

if TYPE_CHECKING:
    from simplerag.config import Settings


def create_vector_store(
    provider: str,
    embedder: BaseEmbedder,
    collection_name: str,
    **kwargs: Any,
) -> BaseVectorStore:
    """Create a vector store instance based on provider.

    Args:
        provider: Provider name ("qdrant" or "faiss")
        embedder: Embedder used for both writes and queries
        collection_name: Collection to read from and write to
        **kwargs: Additional provider-specific parameters

    Returns:
        BaseVectorStore instance
    """
    if provider == "qdrant":
        from .qdrant import QdrantVectorStore

        return QdrantVectorStore(embedder, collection_name, **kwargs)
    elif provider == "faiss":
        from .faiss import FAISSVectorStore

        return FAISSVectorStore(embedder, collection_name, **kwargs)
    else:
        raise ValueError(f"Unknown vector store provider: {provider}")


def get_vector_store(
    settings: "Settings",
    embedder: BaseEmbedder,
    collection_name: Optional[str] = None,
) -> BaseVectorStore:
    """Create the configured vector store, optionally for another collection."""
    store_settings = settings.vector_store
    name = collection_name or store_settings.collection_name

    if store_settings.provider == "faiss":
        return create_vector_store(
            "faiss", embedder, name, storage_dir=store_settings.storage_dir
        )
    return create_vector_store(
        store_settings.provider, embedder, name, url=store_settings.url
    )


__all__ = ["BaseVectorStore", "create_vector_store", "get_vector_store"]
