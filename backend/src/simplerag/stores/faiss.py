import fcntl
import json
import logging
from pathlib import Path
from typing import Any, Optional

import faiss
import numpy as np

from simplerag.adapters import BaseEmbedder
from simplerag.models import Chunk, Document, ScoredDocument
from .base import BaseVectorStore

logger = logging.getLogger(__name__)


class FAISSVectorStore(BaseVectorStore):
    """Local FAISS vector store with JSON metadata persistence.

    Vectors are L2-normalized into an inner-product index, so scores are
    cosine similarities, comparable with the Qdrant store.
    """

    def __init__(
        self,
        embedder: BaseEmbedder,
        collection_name: str,
        storage_dir: Optional[Path] = None,
    ):
        super().__init__(embedder, collection_name)
        self._index_path = None
        self._metadata_path = None
        if storage_dir is not None:
            storage_dir = Path(storage_dir)
            self._index_path = storage_dir / f"faiss_{collection_name}.index"
            self._metadata_path = storage_dir / f"faiss_{collection_name}.json"

        self._index: Optional[faiss.Index] = self._load_index()
        self._metadata: list[dict[str, Any]] = self._load_metadata()

    def _load_index(self) -> Optional[faiss.Index]:
        if self._index_path and self._index_path.exists():
            return faiss.read_index(str(self._index_path))
        return None

    def _load_metadata(self) -> list[dict[str, Any]]:
        if self._metadata_path and self._metadata_path.exists():
            with open(self._metadata_path, "r") as f:
                return json.load(f)
        return []

    def _acquire_lock(self) -> None:
        if self._metadata_path:
            self._metadata_path.parent.mkdir(parents=True, exist_ok=True)
            self._lock_file = open(self._metadata_path.with_suffix(".lock"), "w")
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_EX)

    def _release_lock(self) -> None:
        if hasattr(self, "_lock_file"):
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
            self._lock_file.close()
            del self._lock_file

    def save(self) -> None:
        if self._index_path and self._index is not None:
            self._index_path.parent.mkdir(parents=True, exist_ok=True)
            faiss.write_index(self._index, str(self._index_path))

        if self._metadata_path:
            self._metadata_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._metadata_path, "w") as f:
                json.dump(self._metadata, f, indent=2)

    @staticmethod
    def _normalized(vectors: list[list[float]]) -> np.ndarray:
        array = np.array(vectors, dtype=np.float32)
        faiss.normalize_L2(array)
        return array

    def add_documents(self, chunks: list[Chunk]) -> None:
        if not chunks:
            return

        vectors = self._normalized(self.embedder.embed_batch([c.content for c in chunks]))

        self._acquire_lock()
        try:
            if self._index is None:
                self._index = faiss.IndexFlatIP(vectors.shape[1])
            self._index.add(vectors)

            for chunk in chunks:
                self._metadata.append(
                    {
                        "text": chunk.content,
                        "metadata": {**chunk.metadata, "chunk_index": chunk.chunk_index},
                    }
                )

            self.save()
        finally:
            self._release_lock()

    def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[ScoredDocument]:
        if self._index is None or self._index.ntotal == 0:
            return []

        query_vector = self._normalized([self.embedder.embed(query)])
        scores, indices = self._index.search(query_vector, k)

        results = []
        for score, idx in zip(scores[0], indices[0]):
            if 0 <= idx < len(self._metadata):
                entry = self._metadata[idx]
                results.append(
                    ScoredDocument(
                        document=Document(
                            content=entry.get("text", ""),
                            metadata=entry.get("metadata", {}),
                        ),
                        score=float(score),
                    )
                )
        return results

    def delete_all(self) -> None:
        self._acquire_lock()
        try:
            self._index = None
            self._metadata = []
            if self._index_path and self._index_path.exists():
                self._index_path.unlink()
            self.save()
        finally:
            self._release_lock()

    @property
    def count(self) -> int:
        return self._index.ntotal if self._index is not None else 0
