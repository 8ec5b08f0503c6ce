import os
from typing import Any, Optional

from openai import OpenAI

from simplerag.adapters.base import BaseLLM
from simplerag.adapters.utils import DEFAULT_OLLAMA_URL, create_session_with_pooling

DEFAULT_TEMPERATURE = 0.7


class OpenAILLM(BaseLLM):
    """OpenAI chat-completion provider."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ):
        api_key = kwargs.pop("api_key", None) or os.environ.get("OPENAI_API_KEY")
        base_url = kwargs.pop("base_url", None) or None
        super().__init__(model, **kwargs)

        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.temperature = float(temperature)
        self.max_tokens = max_tokens

    def generate(self, prompt: str, **kwargs: Any) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=kwargs.get("temperature", self.temperature),
            max_tokens=kwargs.get("max_tokens", self.max_tokens),
        )
        return response.choices[0].message.content or ""


class OllamaLLM(BaseLLM):
    """Ollama local chat provider, non-streaming."""

    def __init__(
        self,
        model: str = "llama3",
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
        base_url: Optional[str] = None,
        timeout: float = 120,
        **kwargs: Any,
    ):
        super().__init__(model, **kwargs)
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self.temperature = float(temperature)
        self.max_tokens = max_tokens
        self._timeout = timeout
        self.session = create_session_with_pooling()

    def _options(self, **kwargs: Any) -> dict[str, Any]:
        options: dict[str, Any] = {
            "temperature": kwargs.get("temperature", self.temperature)
        }
        max_tokens = kwargs.get("max_tokens", self.max_tokens)
        if max_tokens:
            options["num_predict"] = max_tokens
        return options

    def generate(self, prompt: str, **kwargs: Any) -> str:
        response = self.session.post(
            f"{self.base_url}/api/generate",
            json={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": self._options(**kwargs),
            },
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()["response"]
