from typing import Optional

from .llm import CompletionPort
from .logging import CHUNK, get_logger
from .models import Chunk, PartialSummary
from .prompts import DEFAULT_SYSTEM_INSTRUCTION, chunk_prompt, chunk_with_context_prompt

logger = get_logger(__name__)


def summarize_chunk(
    port: CompletionPort,
    chunk: Chunk,
    running_context: Optional[str] = None,
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
    temperature: float = 0.2,
) -> PartialSummary:
    """Summarize one chunk with exactly one completion call.

    A non-empty ``running_context`` is placed ahead of the chunk text. The
    parallel pipeline always passes ``None``; only the sequential mode feeds
    the previous chunk's summary in.
    """
    if running_context:
        prompt = chunk_with_context_prompt(running_context, chunk.text)
    else:
        prompt = chunk_prompt(chunk.text)
    logger.debug(f"{CHUNK} #{chunk.index} [{chunk.start}:{chunk.end}] context={bool(running_context)}")
    text = port.complete(system_instruction, prompt, temperature)
    return PartialSummary(index=chunk.index, text=text.strip())
