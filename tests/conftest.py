from pathlib import Path
from typing import Any, Optional

import pytest

from simplerag.adapters.base import BaseEmbedder, BaseLLM
from simplerag.models import Chunk, Document, ScoredDocument
from simplerag.stores.base import BaseVectorStore

VOCABULARY = ["apple", "banana", "cherry", "delta"]


class MockEmbedder(BaseEmbedder):
    """Mock embedder for testing.

    Vectors count keyword occurrences, so texts sharing words score higher.
    """

    def __init__(self, dimension: int = len(VOCABULARY), **kwargs: Any):
        super().__init__("mock-embedder", **kwargs)
        self.dimension = dimension
        self.batch_calls: list[list[str]] = []

    def embed(self, text: str) -> list[float]:
        words = text.lower().split()
        vector = [float(words.count(w)) for w in VOCABULARY]
        vector += [0.0] * (self.dimension - len(vector))
        # Avoid zero vectors so cosine similarity is always defined
        vector[-1] += 0.01
        return vector[: self.dimension]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [self.embed(t) for t in texts]


class MockLLM(BaseLLM):
    """Mock LLM for testing."""

    def __init__(self, model: str = "mock-llm", response: str = "Mock response"):
        super().__init__(model)
        self.response = response
        self.prompts: list[str] = []

    def generate(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        return self.response


class RecordingVectorStore(BaseVectorStore):
    """In-memory store that records calls and can fail on a given batch."""

    def __init__(
        self,
        results: Optional[list[tuple[str, float, dict[str, Any]]]] = None,
        fail_on_call: Optional[int] = None,
    ):
        super().__init__(MockEmbedder(), "test")
        self.add_calls: list[list[Chunk]] = []
        self.search_calls: list[tuple[str, int]] = []
        self.deleted = False
        self._results = results or []
        self._fail_on_call = fail_on_call

    def add_documents(self, chunks: list[Chunk]) -> None:
        self.add_calls.append(list(chunks))
        if self._fail_on_call is not None and len(self.add_calls) == self._fail_on_call:
            raise ConnectionError("vector store unavailable")

    def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[ScoredDocument]:
        self.search_calls.append((query, k))
        return [
            ScoredDocument(
                document=Document(content=content, metadata=metadata), score=score
            )
            for content, score, metadata in self._results[:k]
        ]

    def delete_all(self) -> None:
        self.deleted = True
        self.add_calls = []

    @property
    def count(self) -> int:
        return sum(len(batch) for batch in self.add_calls)


def make_chunks(n: int, source: str = "doc.txt") -> list[Chunk]:
    return [
        Chunk(content=f"chunk {i}", metadata={"source": source}, chunk_index=i)
        for i in range(n)
    ]


@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder()


@pytest.fixture
def mock_llm() -> MockLLM:
    return MockLLM()


@pytest.fixture
def recording_store() -> RecordingVectorStore:
    return RecordingVectorStore()


@pytest.fixture
def temp_storage_dir(tmp_path: Path) -> Path:
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return storage_dir


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "data"
    (folder / "nested").mkdir(parents=True)
    (folder / "notes.txt").write_text("Apples are red. Bananas are yellow.")
    (folder / "readme.md").write_text("# Title\n\nSome markdown body.")
    (folder / "nested" / "table.csv").write_text("name,color\napple,red\nbanana,yellow\n")
    (folder / "nested" / "data.json").write_text('{"fruit": "cherry", "count": 3}')
    (folder / "image.png").write_bytes(b"\x89PNG\r\n")
    return folder


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    config_content = """
[embedding]
provider = "ollama"
model = "nomic-embed-text"

[llm]
provider = "ollama"
model = "${TEST_CHAT_MODEL:-llama3}"
base_url = "${TEST_CHAT_URL}"

[vector_store]
provider = "faiss"
collection = "notes"
storage_dir = "storage"

[ingestion]
directory = "data"
chunk_size = 300
chunk_overlap = 30
batch_size = 4

[retrieval]
top_k = 3
score_threshold = 0.5
"""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_content)
    return config_path
