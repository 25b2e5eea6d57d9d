import logging
import sys
import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(message)s %(details)s"


class RingBufferHandler(logging.Handler):
    """Keeps the most recent send events in memory for inspection."""

    def __init__(self, max_entries: int = 200):
        super().__init__()
        self._events: Deque[Dict[str, Any]] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._events.maxlen

    def emit(self, record: logging.LogRecord) -> None:
        event = {
            "event": record.getMessage(),
            "level": record.levelname,
            "logger": record.name,
            "ts": record.created,
            "details": getattr(record, "details", {}),
        }
        with self._lock:
            self._events.append(event)

    def get_events(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class _DetailsDefault(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "details"):
            record.details = {}
        return True


def create_logger(name: str, ring_size: int, console: bool = False) -> logging.Logger:
    """
    Return the logger ``name`` with a ring buffer attached.

    With ``console`` the events are also written to stderr. Calling this again
    for a configured logger returns it unchanged.
    """
    logger = logging.getLogger(name)
    if ring_buffer_of(logger) is not None:
        return logger
    logger.setLevel(logging.INFO)
    logger.addHandler(RingBufferHandler(max_entries=ring_size))
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.addFilter(_DetailsDefault())
        stream.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(stream)
    logger.propagate = False
    return logger


def ring_buffer_of(logger: logging.Logger) -> Optional[RingBufferHandler]:
    for handler in logger.handlers:
        if isinstance(handler, RingBufferHandler):
            return handler
    return None
