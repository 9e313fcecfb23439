import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from docsum.errors import ServiceError
from docsum.llm import CompletionPort


class StubPort(CompletionPort):
    """Scripted completion port.

    ``reply`` maps a user prompt to the text to return (or raises).
    ``delays`` maps a substring of the prompt to seconds to sleep first,
    which lets tests force the order in which parallel calls finish.
    """

    def __init__(self, reply: Optional[Callable[[str], str]] = None, delays: Optional[Dict[str, float]] = None):
        self.reply = reply or (lambda prompt: "summary")
        self.delays = delays or {}
        self.calls: List[Tuple[Optional[str], str, float]] = []
        self.finished: List[str] = []
        self._lock = threading.Lock()

    def complete(self, system_instruction, user_prompt, temperature):
        with self._lock:
            self.calls.append((system_instruction, user_prompt, temperature))
        for marker, delay in self.delays.items():
            if marker in user_prompt:
                time.sleep(delay)
        out = self.reply(user_prompt)
        with self._lock:
            self.finished.append(out)
        return out


def fail_on(marker: str):
    def reply(prompt: str) -> str:
        if marker in prompt:
            raise ServiceError(f"boom on {marker}")
        return "ok"
    return reply


@pytest.fixture
def stub_port():
    return StubPort()
