import logging
import math
from pathlib import Path
from typing import Any, Optional

from simplerag.config import IndexerConfig, Settings
from simplerag.loaders import BaseDocumentLoader, FolderLoader
from simplerag.models import Chunk, Document
from simplerag.splitters import BaseTextSplitter, TextSplitter
from simplerag.stores import BaseVectorStore, get_vector_store
from .base import create_embedder_from_settings

logger = logging.getLogger(__name__)

SAMPLE_CHUNK_INDEX = 10
SAMPLE_PREVIEW_CHARS = 200


class Indexer:
    """Loads a folder, splits it into chunks and writes them to a vector store.

    Stages run strictly in order, and batches are written one at a time: a
    failing batch aborts the run and leaves earlier batches in the store.
    """

    def __init__(
        self,
        vector_store: Optional[BaseVectorStore] = None,
        config: Optional[IndexerConfig] = None,
        loader: Optional[BaseDocumentLoader] = None,
        splitter: Optional[BaseTextSplitter] = None,
    ):
        self.vector_store = vector_store
        self.config = config or IndexerConfig()
        self.loader = loader or FolderLoader()
        self.splitter = splitter or TextSplitter(
            chunk_size=self.config.chunk_size,
            chunk_overlap=self.config.chunk_overlap,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, vector_store: Optional[BaseVectorStore] = None
    ) -> "Indexer":
        """Create an indexer from settings."""
        if vector_store is None:
            embedder = create_embedder_from_settings(settings)
            vector_store = get_vector_store(settings, embedder)
        return cls(vector_store=vector_store, config=settings.indexer)

    def _log(self, message: str) -> None:
        if self.config.enable_logging:
            logger.info(f"[Indexer] {message}")

    def _log_error(self, message: str) -> None:
        if self.config.enable_logging:
            logger.error(f"[Indexer] {message}")

    def _log_debug(self, message: str, data: Any = None) -> None:
        if self.config.enable_logging:
            logger.debug(f"[Indexer] {message} {data}")

    def load_documents(self, folder_path: Path | str) -> list[Document]:
        self._log(f"Loading documents from folder: {folder_path}")
        try:
            documents = self.loader.load_documents(folder_path)
        except Exception as e:
            self._log_error(f"Error loading documents: {e}")
            raise
        self._log(f"Loaded {len(documents)} documents from folder: {folder_path}")
        return documents

    def split_documents(self, documents: list[Document]) -> list[Chunk]:
        """Split documents into chunks."""
        if not documents:
            self._log("No documents to split")
            return []

        self._log(
            f"Splitting {len(documents)} documents (chunk size: "
            f"{self.config.chunk_size}, overlap: {self.config.chunk_overlap})..."
        )
        chunks = self.splitter.split_documents(documents)
        self._log(f"Split into {len(chunks)} chunks")

        if len(chunks) > SAMPLE_CHUNK_INDEX:
            sample = chunks[SAMPLE_CHUNK_INDEX]
            self._log_debug(
                "Sample chunk:", sample.content[:SAMPLE_PREVIEW_CHARS] + "..."
            )
            self._log_debug("Sample metadata:", sample.metadata)

        return chunks

    def index_documents(self, chunks: list[Chunk]) -> None:
        """Write chunks to the vector store in sequential batches."""
        if not chunks:
            self._log("No chunks to save")
            return

        if self.vector_store is None:
            raise RuntimeError("No vector store configured for indexing")

        batch_size = self.config.batch_size
        total_batches = math.ceil(len(chunks) / batch_size)
        self._log(f"Saving {len(chunks)} chunks to vector store...")

        for i in range(0, len(chunks), batch_size):
            batch = chunks[i : i + batch_size]
            self._log(
                f"Processing batch {i // batch_size + 1}/{total_batches} "
                f"({len(batch)} chunks)"
            )
            try:
                self.vector_store.add_documents(batch)
            except Exception as e:
                self._log_error(f"Error processing batch: {e}")
                raise

        self._log("Successfully saved all chunks to vector store")

    def index_folder(self, folder_path: Path | str) -> None:
        documents = self.load_documents(folder_path)
        chunks = self.split_documents(documents)
        self.index_documents(chunks)

    def reset(self) -> None:
        """Remove everything from the target collection."""
        if self.vector_store is None:
            raise RuntimeError("No vector store configured for indexing")
        self._log(f"Clearing collection {self.vector_store.collection_name}")
        self.vector_store.delete_all()
