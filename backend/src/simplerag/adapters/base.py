from abc import ABC, abstractmethod
from typing import Any


class BaseEmbedder(ABC):
    """Embedding model client.

    Query vectors and stored chunk vectors must come from the same model,
    since the store compares them directly.
    """

    def __init__(self, model: str, **kwargs: Any):
        self.model = model
        self.kwargs = kwargs

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed one query string."""

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed many strings, returning vectors in input order."""


class BaseLLM(ABC):
    """Chat model client, used as a single-turn prompt-to-text call."""

    def __init__(self, model: str, **kwargs: Any):
        self.model = model
        self.kwargs = kwargs

    @abstractmethod
    def generate(self, prompt: str, **kwargs: Any) -> str:
        pass
