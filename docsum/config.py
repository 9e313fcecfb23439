import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .prompts import DEFAULT_SYSTEM_INSTRUCTION
from .windowing import check_sizes

BACKENDS = ("openai", "ollama", "basic")


def _read(env: Mapping[str, str], key: str, cast, default):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} has an invalid value: {raw!r}") from e


@dataclass(frozen=True)
class ServiceConfig:
    """Connection settings for the completion service.

    Built once at an entry point and passed to the port constructor; nothing
    below the entry points reads the environment.
    """

    backend: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    max_retries: int = 3
    retry_base_delay: float = 1.0
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: Optional[str] = None
    request_timeout: float = 120.0
    max_tokens: int = 800


def load_service_config(env: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    if env is None:
        load_dotenv()
        env = os.environ
    backend = env.get("LLM_BACKEND", "openai").lower()
    if backend not in BACKENDS:
        raise ConfigurationError(f"LLM_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")
    return ServiceConfig(
        backend=backend,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL") or "gpt-4o-mini",
        max_retries=_read(env, "OPENAI_MAX_RETRIES", int, 3),
        retry_base_delay=_read(env, "OPENAI_RETRY_BASE_DELAY", float, 1.0),
        ollama_base_url=env.get("OLLAMA_BASE_URL") or "http://localhost:11434",
        ollama_model=env.get("OLLAMA_MODEL") or None,
        request_timeout=_read(env, "LLM_REQUEST_TIMEOUT", float, 120.0),
        max_tokens=_read(env, "LLM_MAX_TOKENS", int, 800),
    )


@dataclass(frozen=True)
class SummarizerConfig:
    """Knobs for one pipeline invocation.

    ``max_workers=None`` runs one thread per chunk. ``carry_context`` switches
    to sequential processing where each chunk sees the previous chunk's
    summary. ``max_context_chars`` enables batched recursive reduction and
    ``stuff_threshold`` sends short documents through a single call.
    """

    window_size: int = 10000
    overlap_size: int = 2000
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION
    temperature: float = 0.2
    max_workers: Optional[int] = None
    timeout: Optional[float] = None
    carry_context: bool = False
    max_context_chars: Optional[int] = None
    stuff_threshold: Optional[int] = None

    def validate(self) -> "SummarizerConfig":
        check_sizes(self.window_size, self.overlap_size)
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigurationError(f"max_workers must be positive, got {self.max_workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.max_context_chars is not None and self.max_context_chars <= 0:
            raise ConfigurationError(f"max_context_chars must be positive, got {self.max_context_chars}")
        return self

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SummarizerConfig":
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            system_instruction=env.get("SYSTEM_INSTRUCTION") or cls.system_instruction,
            window_size=_read(env, "CHUNK_SIZE", int, cls.window_size),
            overlap_size=_read(env, "CHUNK_OVERLAP", int, cls.overlap_size),
            temperature=_read(env, "SUMMARY_TEMPERATURE", float, cls.temperature),
            max_workers=_read(env, "MAX_WORKERS", int, None),
            timeout=_read(env, "SUMMARY_TIMEOUT", float, None),
        )
