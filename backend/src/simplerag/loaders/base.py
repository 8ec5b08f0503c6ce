from abc import ABC, abstractmethod
from pathlib import Path

from simplerag.models import Document


class DocumentLoadError(RuntimeError):
    """Raised when documents under a folder cannot be loaded."""


class BaseDocumentLoader(ABC):
    """Abstract base class for document loaders."""

    @abstractmethod
    def load_documents(self, folder_path: Path | str) -> list[Document]:
        """Load every supported document under a folder, recursively."""
        pass

    @abstractmethod
    def load_file(self, file_path: Path | str) -> list[Document]:
        """Load a single file."""
        pass
