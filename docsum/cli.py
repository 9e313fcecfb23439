"""Command-line entry point: summarize one document and print the result."""

import logging
from dataclasses import replace
from typing import Optional

import typer

from . import prompts
from .config import SummarizerConfig, load_service_config
from .errors import SummarizerError
from .llm import build_port
from .logging import CLI, configure_logging, get_logger
from .pipeline import summarize_document

app = typer.Typer(help="Map-reduce summarization of long documents.")
logger = get_logger(__name__)


@app.callback()
def main() -> None:
    pass


def _build_config(
    system_instruction: Optional[str],
    name: Optional[str],
    voice: Optional[str],
    **overrides,
) -> SummarizerConfig:
    """Start from the environment (CHUNK_SIZE, CHUNK_OVERLAP, ...) and apply the flags that were given."""
    if system_instruction is None and (name or voice):
        system_instruction = prompts.system_instruction(name or "Gemini", voice or "literary critic")
    overrides["system_instruction"] = system_instruction
    return replace(SummarizerConfig.from_env(), **{k: v for k, v in overrides.items() if v is not None})


@app.command("summarize")
def summarize(
    path: str = typer.Argument(..., help="Text or PDF file to summarize."),
    window_size: Optional[int] = typer.Option(None, "--window-size", "-w", help="Window size in characters."),
    overlap: Optional[int] = typer.Option(None, "--overlap", "-o", help="Overlap between windows in characters."),
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t"),
    system_instruction: Optional[str] = typer.Option(
        None, "--system-instruction", "-s", help="System instruction sent with every call."
    ),
    name: Optional[str] = typer.Option(None, "--name", help="Assistant name for the persona instruction."),
    voice: Optional[str] = typer.Option(None, "--voice", help="Reply style for the persona instruction."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Bound the number of parallel chunk calls."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds to wait for all chunk calls."),
    sequential: bool = typer.Option(False, "--sequential", help="Feed each chunk the previous chunk's summary."),
    stuff_threshold: Optional[int] = typer.Option(
        None, "--stuff-threshold", help="Summarize documents up to this many characters in one call."
    ),
    max_context_chars: Optional[int] = typer.Option(
        None, "--max-context-chars", help="Condense partial summaries in batches above this size."
    ),
    show_partials: bool = typer.Option(False, "--show-partials", help="Also print every partial summary."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Summarize PATH and print the final summary.

    Unset options fall back to CHUNK_SIZE, CHUNK_OVERLAP, SUMMARY_TEMPERATURE,
    SYSTEM_INSTRUCTION, MAX_WORKERS and SUMMARY_TIMEOUT from the environment.
    """
    configure_logging(logging.DEBUG if verbose else None)
    try:
        config = _build_config(
            system_instruction,
            name,
            voice,
            window_size=window_size,
            overlap_size=overlap,
            temperature=temperature,
            max_workers=workers,
            timeout=timeout,
            carry_context=sequential or None,
            max_context_chars=max_context_chars,
            stuff_threshold=stuff_threshold,
        )
        port = build_port(load_service_config())
        result = summarize_document(port, path, config)
    except (SummarizerError, FileNotFoundError) as e:
        logger.error(f"{CLI} {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if show_partials:
        for i, text in enumerate(result.partial_summaries, 1):
            typer.echo(f"--- chunk {i}/{result.chunks} ---\n{text}\n")
    typer.echo(result.final_summary)
    logger.info(f"{CLI} {result.mode}, {result.chunks} chunks, {result.elapsed_sec:.2f}s")


if __name__ == "__main__":
    app()
