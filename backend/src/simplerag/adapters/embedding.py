import os
from typing import Any, Optional

from openai import OpenAI

from simplerag.adapters.base import BaseEmbedder
from simplerag.adapters.utils import DEFAULT_OLLAMA_URL, create_session_with_pooling

DEFAULT_BATCH_SIZE = 500


class OpenAIEmbedder(BaseEmbedder):
    """OpenAI embedding provider."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        dimensions: Optional[int] = None,
        **kwargs: Any,
    ):
        api_key = kwargs.pop("api_key", None) or os.environ.get("OPENAI_API_KEY")
        base_url = kwargs.pop("base_url", None) or None
        super().__init__(model, **kwargs)

        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.dimensions = dimensions

    def _request(self, input_data: str | list[str]) -> list[list[float]]:
        params: dict[str, Any] = {"model": self.model, "input": input_data}
        if self.dimensions is not None:
            params["dimensions"] = self.dimensions
        response = self.client.embeddings.create(**params)
        return [item.embedding for item in response.data]

    def embed(self, text: str) -> list[float]:
        return self._request(text)[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return self._request(texts)


class OllamaEmbedder(BaseEmbedder):
    """Ollama local embedding provider.

    Queries and chunks both go through ``/api/embed``. Large inputs are sent
    in consecutive sub-batches, one request at a time.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: float = 120,
        **kwargs: Any,
    ):
        super().__init__(model, **kwargs)
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._batch_size = batch_size
        self._timeout = timeout
        self.session = create_session_with_pooling()

    def embed(self, text: str) -> list[float]:
        return self._embed_request([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        results: list[list[float]] = []
        for i in range(0, len(texts), self._batch_size):
            results.extend(self._embed_request(texts[i : i + self._batch_size]))
        return results

    def _embed_request(self, texts: list[str]) -> list[list[float]]:
        response = self.session.post(
            f"{self.base_url}/api/embed",
            json={"model": self.model, "input": texts},
            timeout=self._timeout,
        )
        response.raise_for_status()
        embeddings = response.json().get("embeddings", [])
        if len(embeddings) != len(texts):
            raise RuntimeError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        return embeddings
