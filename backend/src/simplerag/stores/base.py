from abc import ABC, abstractmethod

from simplerag.adapters import BaseEmbedder
from simplerag.models import Chunk, Document, ScoredDocument


class BaseVectorStore(ABC):
    """Abstract base class for vector store adapters.

    Stores own their embedder: callers pass text in and get documents out.
    """

    def __init__(self, embedder: BaseEmbedder, collection_name: str):
        self.embedder = embedder
        self.collection_name = collection_name

    @abstractmethod
    def add_documents(self, chunks: list[Chunk]) -> None:
        """Embed and upsert chunks into the collection."""
        pass

    @abstractmethod
    def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[ScoredDocument]:
        """Return up to k documents most similar to the query, best first."""
        pass

    def similarity_search(self, query: str, k: int = 4) -> list[Document]:
        return [result.document for result in self.similarity_search_with_score(query, k)]

    @abstractmethod
    def delete_all(self) -> None:
        """Delete all documents from the collection."""
        pass

    @property
    @abstractmethod
    def count(self) -> int:
        """Return the number of vectors in the collection."""
        pass
