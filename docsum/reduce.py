from typing import List, Optional

from .llm import CompletionPort
from .logging import REDUCE, get_logger
from .models import PartialSummary, ResultSet
from .prompts import BULLET_POINTS, DEFAULT_SYSTEM_INSTRUCTION, condense_prompt, final_prompt

logger = get_logger(__name__)


def ordered(results: ResultSet) -> List[PartialSummary]:
    return [results[i] for i in sorted(results)]


def combine(results: ResultSet) -> str:
    """Newline-join partial summaries in ascending chunk order."""
    return "\n".join(p.text for p in ordered(results))


def _batches(partials: List[PartialSummary], max_chars: int) -> List[List[PartialSummary]]:
    batches: List[List[PartialSummary]] = []
    current: List[PartialSummary] = []
    size = 0
    for p in partials:
        added = len(p.text) + (1 if current else 0)
        if current and size + added > max_chars:
            batches.append(current)
            current, size = [], 0
            added = len(p.text)
        current.append(p)
        size += added
    if current:
        batches.append(current)
    return batches


def condense(
    port: CompletionPort,
    results: ResultSet,
    max_context_chars: int,
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
    temperature: float = 0.2,
) -> ResultSet:
    """Reduce partial summaries in ordered batches until their combined text fits.

    Each level merges consecutive summaries whose joined text stays within
    ``max_context_chars`` into one, so order is preserved. Stops early when a
    level cannot merge anything (every summary is already oversized).
    """
    level = 0
    while len(combine(results)) > max_context_chars:
        partials = ordered(results)
        batches = _batches(partials, max_context_chars)
        if len(batches) >= len(partials):
            logger.warning(f"{REDUCE} level {level}: no batch can be merged, continuing with {len(partials)} summaries")
            break
        level += 1
        logger.info(f"{REDUCE} level {level}: {len(partials)} summaries -> {len(batches)} batches")
        results = {}
        for i, batch in enumerate(batches):
            context = "\n".join(p.text for p in batch)
            text = port.complete(system_instruction, condense_prompt(context), temperature)
            results[i] = PartialSummary(index=i, text=text.strip())
    return results


def reduce_summaries(
    port: CompletionPort,
    results: ResultSet,
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
    temperature: float = 0.2,
    max_context_chars: Optional[int] = None,
    bullet_points: int = BULLET_POINTS,
) -> str:
    """Produce the final summary from the partial summaries with one completion call.

    With ``max_context_chars`` set, oversized contexts are condensed first
    (see ``condense``); otherwise the whole combined context goes into the
    single call as is.
    """
    if not results:
        return ""
    if max_context_chars is not None:
        results = condense(port, results, max_context_chars, system_instruction, temperature)
    context = combine(results)
    logger.info(f"{REDUCE} final call over {len(results)} summaries ({len(context)} chars)")
    return port.complete(system_instruction, final_prompt(context, bullet_points), temperature).strip()
