from simplerag.adapters import BaseEmbedder, BaseLLM, create_embedder, create_llm
from simplerag.config import ProviderSettings, Settings


def _create_adapter(settings: ProviderSettings, create_fn):
    """Create an adapter (embedder or LLM) from provider settings."""
    return create_fn(settings.provider, model=settings.model, **settings.options)


def create_embedder_from_settings(settings: Settings) -> BaseEmbedder:
    """Create an embedder instance from settings."""
    return _create_adapter(settings.embedding, create_embedder)


def create_llm_from_settings(settings: Settings) -> BaseLLM:
    """Create an LLM instance from settings."""
    return _create_adapter(settings.llm, create_llm)
