"""Completion Port: the boundary to the external text-generation service.

The pipeline only ever calls ``CompletionPort.complete``. Concrete ports wrap
OpenAI chat completions, a local Ollama server, or an offline heuristic.
"""

import random
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests
from openai import OpenAI
from openai import RateLimitError

from .config import ServiceConfig
from .errors import ConfigurationError, ServiceError
from .logging import LLM, get_logger

logger = get_logger(__name__)


class CompletionPort(ABC):
    """Blocking text completion. Implementations must be safe to share between threads."""

    @abstractmethod
    def complete(self, system_instruction: Optional[str], user_prompt: str, temperature: float) -> str:
        """Return the generated text or raise ``ServiceError``."""


def _messages(system_instruction: Optional[str], user_prompt: str) -> List[Dict[str, str]]:
    messages = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": user_prompt})
    return messages


class OpenAICompletionPort(CompletionPort):
    def __init__(self, config: ServiceConfig, client: Optional[OpenAI] = None):
        if client is None:
            if not config.openai_api_key:
                raise ConfigurationError(
                    "OPENAI_API_KEY is not set. Create a .env file or export the variable before calling LLM functions."
                )
            # retries happen in complete(); keep the SDK from retrying underneath
            client = OpenAI(api_key=config.openai_api_key, timeout=config.request_timeout, max_retries=0)
        self._client = client
        self.model = config.openai_model
        self.max_tokens = config.max_tokens
        self.max_retries = max(1, config.max_retries)
        self.base_delay = config.retry_base_delay

    def _sleep(self, delay: float) -> None:
        time.sleep(delay)

    def complete(self, system_instruction: Optional[str], user_prompt: str, temperature: float) -> str:
        messages = _messages(system_instruction, user_prompt)
        for attempt in range(self.max_retries):
            try:
                resp = self._client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=self.max_tokens,
                )
                return (resp.choices[0].message.content or "").strip()
            except RateLimitError as e:
                if attempt == self.max_retries - 1:
                    raise ServiceError(
                        f"Rate limit exceeded after {self.max_retries} attempts. Consider a larger window, fewer workers, or more quota. Original: {e}"  # noqa: E501
                    ) from e
                delay = self.base_delay * (2 ** attempt) + random.uniform(0, 0.25)
                logger.warning(f"{LLM} rate limited (attempt {attempt + 1}/{self.max_retries}), retrying in {delay:.2f}s")
                self._sleep(delay)
            except Exception as e:  # transient network / 5xx
                if attempt == self.max_retries - 1:
                    raise ServiceError(f"OpenAI completion failed: {e}") from e
                delay = self.base_delay * (1.5 ** attempt) + random.uniform(0, 0.2)
                logger.warning(f"{LLM} completion error (attempt {attempt + 1}/{self.max_retries}): {e}")
                self._sleep(delay)
        raise ServiceError("Exhausted retries without a response.")


class OllamaCompletionPort(CompletionPort):
    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None):
        self.base_url = config.ollama_base_url.rstrip("/")
        self.model = config.ollama_model or config.openai_model
        self.timeout = config.request_timeout
        self._session = session or requests.Session()

    def complete(self, system_instruction: Optional[str], user_prompt: str, temperature: float) -> str:
        try:
            resp = self._session.post(
                f"{self.base_url}/api/chat",
                json={
                    "model": self.model,
                    "messages": _messages(system_instruction, user_prompt),
                    "options": {"temperature": temperature},
                    "stream": False,
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data: Dict[str, Any] = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ServiceError(f"Ollama completion failed: {e}") from e
        message = data.get("message")
        if not isinstance(message, dict) or "content" not in message:
            raise ServiceError(f"Ollama returned no message: {data!r}"[:300])
        return message["content"].strip()


class BasicCompletionPort(CompletionPort):
    """Offline heuristic: the first three sentences of the prompt's text, at most 60 words."""

    @staticmethod
    def _extract_text(user_prompt: str) -> str:
        for marker in ("TEXT:", "```"):
            if marker in user_prompt:
                fragment = user_prompt.split(marker, 1)[1]
                return fragment.split("---", 1)[0].split("```", 1)[0][:5000]
        return user_prompt[:5000]

    def complete(self, system_instruction: Optional[str], user_prompt: str, temperature: float) -> str:
        text = self._extract_text(user_prompt)
        sentences = [s.strip() for s in text.replace("\n", " ").split(".") if s.strip()]
        summary_sentences = sentences[:3]
        if not summary_sentences:
            summary_sentences = [text[:200].strip()]
        summary = ". ".join(summary_sentences)
        words = summary.split()
        if len(words) > 60:
            summary = " ".join(words[:60]) + "..."
        return summary


def build_port(config: ServiceConfig) -> CompletionPort:
    if config.backend == "openai":
        return OpenAICompletionPort(config)
    if config.backend == "ollama":
        return OllamaCompletionPort(config)
    if config.backend == "basic":
        return BasicCompletionPort()
    raise ConfigurationError(f"Unknown LLM backend: {config.backend!r}")
