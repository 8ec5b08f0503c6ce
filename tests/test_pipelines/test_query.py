import json
import logging

import pytest

from conftest import MockLLM, RecordingVectorStore
from simplerag.config import PROMPT_TEMPLATE, QueryConfig
from simplerag.models import Document, ScoredDocument
from simplerag.pipelines import QueryService, build_context, build_prompt, simple_query


def _service(results, llm=None, **config) -> QueryService:
    store = RecordingVectorStore(results=results)
    return QueryService(store, llm or MockLLM(), QueryConfig(**config))


class TestQueryDatabase:
    def test_requests_top_five_candidates(self) -> None:
        service = _service([("A", 0.9, {"source": "a.txt"})])
        service.query_database("Q")
        assert service.vector_store.search_calls == [("Q", 5)]

    def test_no_results_returns_none(self, caplog: pytest.LogCaptureFixture) -> None:
        llm = MockLLM()
        service = _service([], llm=llm)

        with caplog.at_level(logging.ERROR):
            assert service.query_database("Q") is None

        assert llm.prompts == []
        assert "Unable to find matching results." in caplog.text

    def test_low_top_score_returns_none_even_if_others_pass(self) -> None:
        llm = MockLLM()
        # Only the first result is checked against the threshold
        service = _service(
            [("A", 0.59, {"source": "a.txt"}), ("B", 0.95, {"source": "b.txt"})],
            llm=llm,
        )

        assert service.query_database("Q") is None
        assert llm.prompts == []

    def test_top_score_at_threshold_passes(self) -> None:
        service = _service([("A", 0.6, {"source": "a.txt"})])

        result = service.query_database("Q")

        assert result is not None
        assert result.response == "Mock response"
        assert result.sources == ["a.txt"]

    def test_context_includes_candidates_below_threshold(self) -> None:
        llm = MockLLM()
        service = _service(
            [("A", 0.9, {"source": "a.txt"}), ("B", 0.1, {"source": "b.txt"})],
            llm=llm,
        )

        result = service.query_database("Q")

        assert "A\n\n---\n\nB" in llm.prompts[0]
        assert result.sources == ["a.txt", "b.txt"]

    def test_sources_follow_candidate_order_with_none_for_missing(self) -> None:
        service = _service(
            [
                ("A", 0.9, {"source": "a.txt"}),
                ("B", 0.8, {}),
                ("C", 0.7, {"source": "c.pdf", "page_label": "2"}),
                ("D", 0.6, {"source": ""}),
            ]
        )

        result = service.query_database("Q")

        assert result.sources == ["a.txt", None, "c.pdf", None]

    def test_end_to_end_prompt(self) -> None:
        llm = MockLLM(response="The answer")
        service = _service([("A", 0.9, {"source": "a"}), ("B", 0.75, {"source": "b"})], llm=llm)

        result = service.query_database("Q")

        assert llm.prompts == [
            PROMPT_TEMPLATE.format(context="A\n\n---\n\nB", question="Q")
        ]
        assert llm.prompts[0].endswith("Answer the question based on the above context: Q")
        assert result.response == "The answer"
        assert result.sources == ["a", "b"]

    def test_logs_response_and_sources(self, caplog: pytest.LogCaptureFixture) -> None:
        service = _service([("A", 0.9, {"source": "a.txt"}), ("B", 0.8, {})])

        with caplog.at_level(logging.INFO):
            service.query_database("Q")

        expected = f"Response: Mock response\nSources: {json.dumps(['a.txt', None])}"
        assert expected in caplog.text

    def test_custom_threshold_and_top_k(self) -> None:
        service = _service(
            [("A", 0.4, {}), ("B", 0.3, {}), ("C", 0.2, {})],
            top_k=2,
            score_threshold=0.35,
        )

        result = service.query_database("Q")

        assert result is not None
        assert result.sources == [None, None]

    def test_llm_errors_propagate(self) -> None:
        class FailingLLM(MockLLM):
            def generate(self, prompt, **kwargs):
                raise TimeoutError("model unreachable")

        service = _service([("A", 0.9, {})], llm=FailingLLM())
        with pytest.raises(TimeoutError):
            service.query_database("Q")


class TestPromptHelpers:
    def test_prompt_template_is_verbatim(self) -> None:
        assert PROMPT_TEMPLATE == (
            "Answer the question based only on the following context:\n\n"
            "{context}\n\n---\n\n"
            "Answer the question based on the above context: {question}"
        )

    def test_build_context_joins_in_order(self) -> None:
        results = [
            ScoredDocument(document=Document(content="A"), score=0.9),
            ScoredDocument(document=Document(content="B"), score=0.75),
        ]
        assert build_context(results) == "A\n\n---\n\nB"

    def test_build_context_empty(self) -> None:
        assert build_context([]) == ""

    def test_build_prompt_keeps_braces_in_context(self) -> None:
        prompt = build_prompt(PROMPT_TEMPLATE, "json {\"a\": 1}", "Q?")
        assert 'json {"a": 1}' in prompt
        assert prompt.endswith("context: Q?")


class TestSimpleQuery:
    def test_sends_raw_question(self, caplog: pytest.LogCaptureFixture) -> None:
        llm = MockLLM(response="Paris")

        with caplog.at_level(logging.INFO):
            assert simple_query(llm, "Capital of France?") == "Paris"

        assert llm.prompts == ["Capital of France?"]
        assert "Paris" in caplog.text
