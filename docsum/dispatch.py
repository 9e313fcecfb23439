"""Fan chunk summarization out over worker threads and join the results."""

import queue
import threading
import time
from typing import Callable, Optional, Sequence

from .errors import ConfigurationError, ServiceError
from .logging import DISPATCH, get_logger
from .models import Chunk, PartialSummary, ResultSet

logger = get_logger(__name__)


def dispatch(
    chunks: Sequence[Chunk],
    summarize_one: Callable[[Chunk], PartialSummary],
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None,
) -> ResultSet:
    """Run ``summarize_one`` for every chunk concurrently and wait for all of them.

    Chunks are handed out in index order; ``max_workers=None`` gives every
    chunk its own thread, otherwise at most ``max_workers`` run at once and
    the rest wait in the queue.

    The first task failure is re-raised unchanged once observed and all
    finished partial summaries are dropped. Tasks already running are left to
    finish; queued chunks are never started. ``timeout`` bounds the whole
    barrier and raises ``ServiceError`` when it expires. Workers are daemon
    threads, so a call still hanging after a timeout does not keep the
    process alive.
    """
    if max_workers is not None and max_workers <= 0:
        raise ConfigurationError(f"max_workers must be positive, got {max_workers}")
    if not chunks:
        return {}
    workers = len(chunks) if max_workers is None else min(max_workers, len(chunks))
    logger.info(f"{DISPATCH} {len(chunks)} chunks on {workers} workers")

    todo: "queue.Queue[Chunk]" = queue.Queue()
    for chunk in chunks:
        todo.put(chunk)
    done: queue.Queue = queue.Queue()
    stop = threading.Event()

    def worker() -> None:
        while not stop.is_set():
            try:
                chunk = todo.get_nowait()
            except queue.Empty:
                return
            try:
                done.put((chunk.index, summarize_one(chunk), None))
            except Exception as e:
                done.put((chunk.index, None, e))

    for n in range(workers):
        threading.Thread(target=worker, name=f"docsum-chunk-{n}", daemon=True).start()

    deadline = None if timeout is None else time.monotonic() + timeout
    results: ResultSet = {}
    try:
        while len(results) < len(chunks):
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                index, partial, error = done.get(timeout=remaining)
            except queue.Empty:
                unfinished = len(chunks) - len(results)
                raise ServiceError(f"Timed out after {timeout}s with {unfinished}/{len(chunks)} chunks unfinished")
            if error is not None:
                logger.error(f"{DISPATCH} chunk #{index} failed: {error}")
                raise error
            if partial.index != index or index in results:
                raise RuntimeError(f"Chunk #{index} produced a summary for #{partial.index}")
            results[index] = partial
    finally:
        stop.set()
    logger.debug(f"{DISPATCH} joined {len(results)} partial summaries")
    return results
