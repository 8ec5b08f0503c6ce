from typing import Any, Generic, Type, TypeVar

from simplerag.adapters.base import BaseEmbedder, BaseLLM

T = TypeVar("T")


class _ProviderRegistry(Generic[T]):
    """Maps a provider name from configuration to its client class."""

    def __init__(self, kind: str):
        self.kind = kind
        self._classes: dict[str, Type[T]] = {}

    def register(self, provider: str, cls: Type[T]) -> None:
        self._classes[provider] = cls

    def create(self, provider: str, **kwargs: Any) -> T:
        try:
            cls = self._classes[provider]
        except KeyError:
            raise ValueError(
                f"Unknown {self.kind} provider: {provider}. "
                f"Available: {self.providers()}"
            ) from None
        return cls(**kwargs)

    def providers(self) -> list[str]:
        return sorted(self._classes)


_embedders: _ProviderRegistry[BaseEmbedder] = _ProviderRegistry("embedder")
_llms: _ProviderRegistry[BaseLLM] = _ProviderRegistry("LLM")


def register_embedder(provider: str, cls: Type[BaseEmbedder]) -> None:
    _embedders.register(provider, cls)


def register_llm(provider: str, cls: Type[BaseLLM]) -> None:
    _llms.register(provider, cls)


def create_embedder(provider: str, **kwargs: Any) -> BaseEmbedder:
    """Instantiate the embedder registered under ``provider``.

    Keyword arguments go straight to the client constructor (model,
    base_url, api_key and so on). Raises ValueError for an unknown name.
    """
    return _embedders.create(provider, **kwargs)


def create_llm(provider: str, **kwargs: Any) -> BaseLLM:
    """Instantiate the chat model registered under ``provider``."""
    return _llms.create(provider, **kwargs)


def list_embedder_providers() -> list[str]:
    return _embedders.providers()


def list_llm_providers() -> list[str]:
    return _llms.providers()


from simplerag.adapters.embedding import OllamaEmbedder, OpenAIEmbedder  # noqa: E402
from simplerag.adapters.llm import OllamaLLM, OpenAILLM  # noqa: E402

register_embedder("ollama", OllamaEmbedder)
register_embedder("openai", OpenAIEmbedder)
register_llm("ollama", OllamaLLM)
register_llm("openai", OpenAILLM)

__all__ = [
    "BaseEmbedder",
    "BaseLLM",
    "OllamaEmbedder",
    "OllamaLLM",
    "OpenAIEmbedder",
    "OpenAILLM",
    "create_embedder",
    "create_llm",
    "list_embedder_providers",
    "list_llm_providers",
    "register_embedder",
    "register_llm",
]
