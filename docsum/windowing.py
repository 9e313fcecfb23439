from typing import List

from .errors import ConfigurationError
from .logging import WINDOW, get_logger
from .models import Chunk

logger = get_logger(__name__)


def check_sizes(window_size: int, overlap_size: int) -> int:
    if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size <= 0:
        raise ConfigurationError(f"window_size must be a positive integer, got {window_size!r}")
    if isinstance(overlap_size, bool) or not isinstance(overlap_size, int) or overlap_size < 0:
        raise ConfigurationError(f"overlap_size must be a non-negative integer, got {overlap_size!r}")
    stride = window_size - overlap_size
    if stride <= 0:
        raise ConfigurationError(
            f"overlap_size ({overlap_size}) must be smaller than window_size ({window_size})"
        )
    return stride


def window(document: str, window_size: int, overlap_size: int = 0) -> List[Chunk]:
    """Split ``document`` into overlapping character windows.

    Windows start every ``window_size - overlap_size`` characters and are
    ``window_size`` long, except the last one, which stops at the end of the
    document. A document no longer than one window is a single chunk and an
    empty document gives an empty list.

    Raises:
        ConfigurationError: if the sizes do not leave a positive stride.
    """
    stride = check_sizes(window_size, overlap_size)
    length = len(document)
    if 0 < length <= window_size:
        return [Chunk(index=0, start=0, end=length, text=document)]
    chunks: List[Chunk] = []
    start = 0
    while start < length:
        end = min(start + window_size, length)
        chunks.append(Chunk(index=len(chunks), start=start, end=end, text=document[start:end]))
        start += stride
    logger.debug(
        f"{WINDOW} {len(chunks)} chunks from {length} chars (window={window_size}, overlap={overlap_size})"
    )
    return chunks
