from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Chunk:
    """A window of the source document covering ``[start, end)``."""

    index: int
    start: int
    end: int
    text: str

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class PartialSummary:
    index: int
    text: str


# chunk index -> partial summary; only key order matters
ResultSet = Dict[int, PartialSummary]


@dataclass(frozen=True)
class SummaryResult:
    final_summary: str
    chunks: int
    partial_summaries: List[str] = field(default_factory=list)
    mode: str = "map_reduce"
    elapsed_sec: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "chunks": self.chunks,
            "partial_summaries": list(self.partial_summaries),
            "final_summary": self.final_summary,
            "elapsed_sec": round(self.elapsed_sec, 3),
        }
