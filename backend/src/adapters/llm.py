import os
from typing import Any, Optional

from openai import OpenAI

from adapters.base import BaseLLM
from adapters.utils import create_session_with_pooling

DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_K = 40
DEFAULT_TOP_P = 0.95
DEFAULT_MAX_TOKENS = 1024

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# Gemini names the assistant side of a conversation "model".
_GEMINI_ROLES = {"user": "user", "assistant": "model", "model": "model"}


class GeminiLLM(BaseLLM):
    """Google Gemini provider using the generateContent REST endpoint."""

    def __init__(
        self,
        model: str = "gemini-1.5-flash",
        api_key: Optional[str] = None,
        base_url: str = GEMINI_BASE_URL,
        temperature: float = DEFAULT_TEMPERATURE,
        top_k: int = DEFAULT_TOP_K,
        top_p: float = DEFAULT_TOP_P,
        max_tokens: Optional[int] = DEFAULT_MAX_TOKENS,
        timeout: int = 120,
        **kwargs: Any,
    ):
        super().__init__(model, **kwargs)
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY environment variable required for Gemini provider")

        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.top_k = top_k
        self.top_p = top_p
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = create_session_with_pooling()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def _generation_config(self, **kwargs: Any) -> dict[str, Any]:
        config = {
            "temperature": kwargs.get("temperature", self.temperature),
            "topK": kwargs.get("top_k", self.top_k),
            "topP": kwargs.get("top_p", self.top_p),
        }
        max_tokens = kwargs.get("max_tokens", self.max_tokens)
        if max_tokens:
            config["maxOutputTokens"] = max_tokens
        return config

    def _post(self, payload: dict[str, Any]) -> str:
        response = self.session.post(
            self.endpoint,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        return data["candidates"][0]["content"]["parts"][0]["text"]

    def generate(self, prompt: str, **kwargs: Any) -> str:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self._generation_config(**kwargs),
        }
        return self._post(payload)

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        system_parts = [
            {"text": msg["content"]} for msg in messages if msg["role"] == "system"
        ]
        contents = [
            {"role": _GEMINI_ROLES[msg["role"]], "parts": [{"text": msg["content"]}]}
            for msg in messages
            if msg["role"] != "system"
        ]

        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": self._generation_config(**kwargs),
        }
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}
        return self._post(payload)


class OpenAILLM(BaseLLM):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = DEFAULT_TEMPERATURE,
        top_p: float = DEFAULT_TOP_P,
        max_tokens: Optional[int] = DEFAULT_MAX_TOKENS,
        **kwargs: Any,
    ):
        api_key = kwargs.pop("api_key", None) or os.environ.get("OPENAI_API_KEY")
        base_url = kwargs.pop("base_url", None)
        # OpenAI has no top-k sampling.
        kwargs.pop("top_k", None)
        super().__init__(model, **kwargs)

        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens

    def _get_completion_params(
        self, messages: list[dict[str, str]], **kwargs: Any
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.get("temperature", self.temperature),
            "top_p": kwargs.get("top_p", self.top_p),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }

    def generate(self, prompt: str, **kwargs: Any) -> str:
        return self.chat([{"role": "user", "content": prompt}], **kwargs)

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        params = self._get_completion_params(messages, **kwargs)
        response = self.client.chat.completions.create(**params)
        return response.choices[0].message.content or ""
