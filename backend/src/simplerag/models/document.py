"""Data models for SimpleRAG."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A unit of loaded text with its provenance metadata.

    Attributes:
        content: The text content.
        metadata: Provenance metadata; includes ``source`` once loaded.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def source(self) -> Optional[str]:
        return self.metadata.get("source") or None


class Chunk(Document):
    """A bounded slice of a parent document's content.

    Attributes:
        chunk_index: Position of the chunk within its parent document.
    """

    chunk_index: int = 0


class ScoredDocument(BaseModel):
    """A document returned by similarity search with its score.

    Higher scores mean more similar; the range depends on the store's metric.
    """

    model_config = ConfigDict(frozen=True)

    document: Document
    score: float


class QueryResult(BaseModel):
    """Answer produced by the query service."""

    response: str
    sources: list[Optional[str]] = Field(default_factory=list)
