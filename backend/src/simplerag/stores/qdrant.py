import logging
import uuid
from typing import Any, Optional

from qdrant_client import QdrantClient
from qdrant_client.http import models as rest

from simplerag.adapters import BaseEmbedder
from simplerag.models import Chunk, Document, ScoredDocument
from .base import BaseVectorStore

logger = logging.getLogger(__name__)

CONTENT_KEY = "page_content"
METADATA_KEY = "metadata"


class QdrantVectorStore(BaseVectorStore):
    """Qdrant-backed vector store using cosine distance.

    Points carry ``{"page_content": ..., "metadata": {...}}`` payloads. The
    collection is created on first write, sized to the embedder's output.
    """

    def __init__(
        self,
        embedder: BaseEmbedder,
        collection_name: str,
        url: Optional[str] = None,
        client: Optional[QdrantClient] = None,
        **client_kwargs: Any,
    ):
        super().__init__(embedder, collection_name)
        if client is None:
            if url == ":memory:":
                client = QdrantClient(location=":memory:", **client_kwargs)
            else:
                client = QdrantClient(url=url, **client_kwargs)
        self.client = client

    def _ensure_collection(self, dimension: int) -> None:
        if self.client.collection_exists(self.collection_name):
            return
        logger.info(
            f"Creating collection {self.collection_name} (dimension: {dimension})"
        )
        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=rest.VectorParams(
                size=dimension, distance=rest.Distance.COSINE
            ),
        )

    def add_documents(self, chunks: list[Chunk]) -> None:
        if not chunks:
            return

        vectors = self.embedder.embed_batch([c.content for c in chunks])
        self._ensure_collection(len(vectors[0]))

        points = [
            rest.PointStruct(
                id=str(uuid.uuid4()),
                vector=vector,
                payload={
                    CONTENT_KEY: chunk.content,
                    METADATA_KEY: {**chunk.metadata, "chunk_index": chunk.chunk_index},
                },
            )
            for chunk, vector in zip(chunks, vectors)
        ]
        self.client.upsert(
            collection_name=self.collection_name, points=points, wait=True
        )

    def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[ScoredDocument]:
        if not self.client.collection_exists(self.collection_name):
            logger.warning(f"Collection {self.collection_name} does not exist")
            return []

        query_vector = self.embedder.embed(query)
        response = self.client.query_points(
            collection_name=self.collection_name,
            query=query_vector,
            limit=k,
            with_payload=True,
        )

        results = []
        for point in response.points:
            payload = point.payload or {}
            results.append(
                ScoredDocument(
                    document=Document(
                        content=payload.get(CONTENT_KEY, ""),
                        metadata=payload.get(METADATA_KEY) or {},
                    ),
                    score=point.score,
                )
            )
        return results

    def delete_all(self) -> None:
        if self.client.collection_exists(self.collection_name):
            self.client.delete_collection(self.collection_name)

    @property
    def count(self) -> int:
        if not self.client.collection_exists(self.collection_name):
            return 0
        return self.client.count(collection_name=self.collection_name, exact=True).count
