from __future__ import annotations

import sys
from typing import List, Optional, Protocol, TextIO, runtime_checkable


@runtime_checkable
class ErrorSink(Protocol):
    """Anything that can report a single error line (``logging.Logger`` fits)."""

    def error(self, message: str) -> None: ...


class StderrLogger:
    """Default sink: one line per failure on standard error."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def error(self, message: str) -> None:
        stream = self._stream or sys.stderr
        stream.write(f"{message}\n")
        stream.flush()


class MemoryLogger:
    """Keeps reported errors in memory so callers can inspect failed deliveries."""

    def __init__(self) -> None:
        self._entries: List[str] = []

    def error(self, message: str) -> None:
        self._entries.append(message)

    @property
    def entries(self) -> List[str]:
        return list(self._entries)
