from .base import create_embedder_from_settings, create_llm_from_settings
from .indexing import Indexer
from .query import (
    CONTEXT_DELIMITER,
    QueryService,
    build_context,
    build_prompt,
    simple_query,
)

__all__ = [
    "CONTEXT_DELIMITER",
    "Indexer",
    "QueryService",
    "build_context",
    "build_prompt",
    "create_embedder_from_settings",
    "create_llm_from_settings",
    "simple_query",
]
