"""In-memory ring buffer of recent pickem log records, served at /api/logs."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

ROOT_LOGGER = "pickem"


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    message: str


class BufferHandler(logging.Handler):
    def __init__(self, maxlen: int = 200) -> None:
        super().__init__()
        self._buffer: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._buffer.append(
                LogEntry(
                    timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc)
                    .strftime("%Y-%m-%d %H:%M:%S UTC"),
                    level=record.levelname,
                    logger=record.name,
                    message=self.format(record),
                )
            )
        except Exception:
            self.handleError(record)

    def entries(self, limit: int = 100, min_level: str | None = None) -> list[dict]:
        """Newest first, optionally only records at or above *min_level*."""
        items = list(self._buffer)
        if min_level:
            threshold = logging.getLevelName(min_level.upper())
            if isinstance(threshold, int):
                items = [e for e in items if logging.getLevelName(e.level) >= threshold]
        items = items[-limit:] if limit > 0 else []
        items.reverse()
        return [asdict(e) for e in items]

    def clear(self) -> None:
        self._buffer.clear()


_handler: BufferHandler | None = None


def get_buffer_handler() -> BufferHandler:
    global _handler
    if _handler is None:
        _handler = BufferHandler(maxlen=200)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        _handler.setLevel(logging.DEBUG)
    return _handler


def install_buffer_handler() -> BufferHandler:
    """Attach the buffer handler to the package logger so every module feeds it.

    The logger captures DEBUG; callers narrow with ``entries(min_level=...)``.
    """
    handler = get_buffer_handler()
    lg = logging.getLogger(ROOT_LOGGER)
    if handler not in lg.handlers:
        lg.addHandler(handler)
    lg.setLevel(logging.DEBUG)
    return handler
