from pathlib import Path

import pytest

from simplerag.models import Chunk
from simplerag.stores import create_vector_store
from simplerag.stores.faiss import FAISSVectorStore


def _chunks() -> list[Chunk]:
    return [
        Chunk(content="apple apple pie", metadata={"source": "a.txt"}),
        Chunk(content="banana bread", metadata={"source": "b.txt"}, chunk_index=1),
        Chunk(content="cherry tart", metadata={}),
    ]


@pytest.fixture
def faiss_store(mock_embedder, temp_storage_dir: Path) -> FAISSVectorStore:
    return FAISSVectorStore(mock_embedder, "notes", storage_dir=temp_storage_dir)


class TestFAISSVectorStore:
    def test_empty_store_returns_no_results(self, faiss_store: FAISSVectorStore) -> None:
        assert faiss_store.count == 0
        assert faiss_store.similarity_search_with_score("apple", k=3) == []

    def test_add_documents_embeds_once_per_call(
        self, faiss_store: FAISSVectorStore, mock_embedder
    ) -> None:
        faiss_store.add_documents(_chunks())

        assert faiss_store.count == 3
        assert mock_embedder.batch_calls == [
            ["apple apple pie", "banana bread", "cherry tart"]
        ]

    def test_search_ranks_by_cosine_similarity(
        self, faiss_store: FAISSVectorStore
    ) -> None:
        faiss_store.add_documents(_chunks())

        results = faiss_store.similarity_search_with_score("apple", k=3)

        assert results[0].document.content == "apple apple pie"
        assert results[0].score == pytest.approx(1.0, abs=1e-3)
        assert results[0].score > results[1].score
        assert results[0].document.metadata["source"] == "a.txt"

    def test_similarity_search_returns_documents(
        self, faiss_store: FAISSVectorStore
    ) -> None:
        faiss_store.add_documents(_chunks())

        documents = faiss_store.similarity_search("banana", k=1)

        assert [d.content for d in documents] == ["banana bread"]
        assert documents[0].metadata["chunk_index"] == 1

    def test_persists_between_instances(
        self, faiss_store: FAISSVectorStore, mock_embedder, temp_storage_dir: Path
    ) -> None:
        faiss_store.add_documents(_chunks())

        reopened = FAISSVectorStore(mock_embedder, "notes", storage_dir=temp_storage_dir)

        assert reopened.count == 3
        assert (temp_storage_dir / "faiss_notes.index").exists()
        assert reopened.similarity_search("cherry", k=1)[0].content == "cherry tart"

    def test_collections_are_separate(
        self, faiss_store: FAISSVectorStore, mock_embedder, temp_storage_dir: Path
    ) -> None:
        faiss_store.add_documents(_chunks())
        other = FAISSVectorStore(mock_embedder, "other", storage_dir=temp_storage_dir)
        assert other.count == 0

    def test_delete_all(self, faiss_store: FAISSVectorStore) -> None:
        faiss_store.add_documents(_chunks())
        faiss_store.delete_all()

        assert faiss_store.count == 0
        assert faiss_store.similarity_search("apple") == []

    def test_factory_creates_faiss_store(self, mock_embedder) -> None:
        store = create_vector_store("faiss", mock_embedder, "notes")
        assert isinstance(store, FAISSVectorStore)
        assert store.collection_name == "notes"

    def test_factory_rejects_unknown_provider(self, mock_embedder) -> None:
        with pytest.raises(ValueError, match="Unknown vector store provider"):
            create_vector_store("pinecone", mock_embedder, "notes")
