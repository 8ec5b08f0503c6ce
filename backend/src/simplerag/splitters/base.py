from abc import ABC, abstractmethod

from simplerag.models import Chunk, Document


class BaseTextSplitter(ABC):
    """Abstract base class for text splitters."""

    @abstractmethod
    def split_documents(self, documents: list[Document]) -> list[Chunk]:
        """Split documents into chunks with preserved metadata."""
        pass

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split raw text into chunks without metadata."""
        pass
