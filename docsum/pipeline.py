import time
from functools import partial
from typing import Optional

from .config import SummarizerConfig
from .dispatch import dispatch
from .llm import CompletionPort
from .loader import load_document
from .logging import PIPELINE, get_logger
from .models import ResultSet, SummaryResult
from .prompts import DEFAULT_SYSTEM_INSTRUCTION, stuff_prompt
from .reduce import ordered, reduce_summaries
from .summarize import summarize_chunk
from .windowing import window

logger = get_logger(__name__)


def stuff(
    port: CompletionPort,
    document: str,
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
    temperature: float = 0.2,
) -> str:
    """Summarize the whole document with a single completion call."""
    if not document:
        return ""
    return port.complete(system_instruction, stuff_prompt(document), temperature).strip()


def _summarize_sequential(port: CompletionPort, chunks, config: SummarizerConfig) -> ResultSet:
    results: ResultSet = {}
    context = None
    for chunk in chunks:
        summary = summarize_chunk(port, chunk, context, config.system_instruction, config.temperature)
        results[chunk.index] = summary
        context = summary.text
    return results


def summarize_text(port: CompletionPort, document: str, config: Optional[SummarizerConfig] = None) -> SummaryResult:
    """Summarize ``document`` through the map-reduce pipeline.

    Chunks are summarized in parallel without shared context, unless
    ``config.carry_context`` asks for sequential processing where every chunk
    sees the previous chunk's summary. Documents up to
    ``config.stuff_threshold`` characters skip chunking entirely.

    An empty document returns an empty result without calling the port. Any
    chunk failure propagates and no final summary is produced.
    """
    config = (config or SummarizerConfig()).validate()
    started = time.time()
    if not document:
        logger.info(f"{PIPELINE} empty document, nothing to summarize")
        return SummaryResult(final_summary="", chunks=0, mode="empty")

    if config.stuff_threshold is not None and len(document) <= config.stuff_threshold:
        logger.info(f"{PIPELINE} stuffing {len(document)} chars into one call")
        final = stuff(port, document, config.system_instruction, config.temperature)
        return SummaryResult(final_summary=final, chunks=1, mode="stuff", elapsed_sec=time.time() - started)

    chunks = window(document, config.window_size, config.overlap_size)
    if config.carry_context:
        mode = "sequential"
        results = _summarize_sequential(port, chunks, config)
    else:
        mode = "map_reduce"
        summarize_one = partial(
            summarize_chunk,
            port,
            running_context=None,
            system_instruction=config.system_instruction,
            temperature=config.temperature,
        )
        results = dispatch(chunks, summarize_one, max_workers=config.max_workers, timeout=config.timeout)

    final = reduce_summaries(
        port,
        results,
        system_instruction=config.system_instruction,
        temperature=config.temperature,
        max_context_chars=config.max_context_chars,
    )
    elapsed = time.time() - started
    logger.info(f"{PIPELINE} {mode}: {len(chunks)} chunks summarized in {elapsed:.2f}s")
    return SummaryResult(
        final_summary=final,
        chunks=len(chunks),
        partial_summaries=[p.text for p in ordered(results)],
        mode=mode,
        elapsed_sec=elapsed,
    )


def summarize_document(port: CompletionPort, path: str, config: Optional[SummarizerConfig] = None) -> SummaryResult:
    return summarize_text(port, load_document(path), config)
