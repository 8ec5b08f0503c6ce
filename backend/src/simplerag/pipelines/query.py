import json
import logging
from typing import Optional

from simplerag.adapters import BaseLLM
from simplerag.config import QueryConfig, Settings
from simplerag.models import QueryResult, ScoredDocument
from simplerag.stores import BaseVectorStore, get_vector_store
from .base import create_embedder_from_settings, create_llm_from_settings

logger = logging.getLogger(__name__)

CONTEXT_DELIMITER = "\n\n---\n\n"


def build_context(results: list[ScoredDocument]) -> str:
    """Join retrieved contents, in rank order, into one context string."""
    return CONTEXT_DELIMITER.join(result.document.content for result in results)


def build_prompt(template: str, context: str, question: str) -> str:
    return template.format(context=context, question=question)


def collect_sources(results: list[ScoredDocument]) -> list[Optional[str]]:
    return [result.document.metadata.get("source") or None for result in results]


class QueryService:
    """Answers questions from retrieved context.

    Retrieval is gated on the top hit only: when it clears the threshold,
    every retrieved candidate goes into the prompt, including those that
    scored below it.
    """

    def __init__(
        self,
        vector_store: BaseVectorStore,
        llm: BaseLLM,
        config: Optional[QueryConfig] = None,
    ):
        self.vector_store = vector_store
        self.llm = llm
        self.config = config or QueryConfig()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        vector_store: Optional[BaseVectorStore] = None,
        llm: Optional[BaseLLM] = None,
    ) -> "QueryService":
        """Create a query service from settings."""
        if vector_store is None:
            embedder = create_embedder_from_settings(settings)
            vector_store = get_vector_store(settings, embedder)
        return cls(
            vector_store=vector_store,
            llm=llm or create_llm_from_settings(settings),
            config=settings.query,
        )

    def retrieve(self, query_text: str) -> list[ScoredDocument]:
        results = self.vector_store.similarity_search_with_score(
            query_text, self.config.top_k
        )
        logger.debug(f"Retrieved {len(results)} results: {results}")
        return results

    def passes_gate(self, results: list[ScoredDocument]) -> bool:
        return bool(results) and results[0].score >= self.config.score_threshold

    def query_database(self, query_text: str) -> Optional[QueryResult]:
        """Answer a question, or return None when nothing relevant was found."""
        results = self.retrieve(query_text)

        if not self.passes_gate(results):
            logger.error("Unable to find matching results.")
            return None

        context = build_context(results)
        prompt = build_prompt(self.config.prompt_template, context, query_text)

        response_text = self.llm.generate(prompt)
        sources = collect_sources(results)

        logger.info(f"Response: {response_text}\nSources: {json.dumps(sources)}")
        return QueryResult(response=response_text, sources=sources)


def simple_query(llm: BaseLLM, query_text: str) -> str:
    """Send the question straight to the model, without retrieval."""
    response_text = llm.generate(query_text)
    logger.info(response_text)
    return response_text
