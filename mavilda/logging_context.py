"""Per-session log tagging for the lead chat.

Every message the engine processes belongs to one chat session (the
widget's ``sessionId``). While a turn runs, that ID is kept in a context
variable and stamped on each log record as ``session_id``, so the log
format can prefix lines with it and a single lead's chat can be grepped
out of a busy log.

Usage:
    from mavilda.logging_context import get_session_logger, session_scope

    logger = get_session_logger(__name__)
    with session_scope("web_1712345678"):
        logger.info("Turn 3: intent=price")  # → [web_1712345678] Turn 3: intent=price
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

NO_SESSION = "-"

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


def get_session_id() -> str:
    return _session_id.get()


@contextmanager
def session_scope(session_id: str) -> Iterator[None]:
    """Tag log records with `session_id` for the duration of one turn.

    The previous value is restored on exit, so log lines written between
    turns (startup, /reset) are not attributed to the last lead.
    """
    token = _session_id.set(session_id)
    try:
        yield
    finally:
        _session_id.reset(token)


class SessionIdFilter(logging.Filter):
    """Stamps the active chat session ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def install_session_filter() -> None:
    """Attach the filter to the root handlers.

    The configured format includes ``%(session_id)s``, so every record
    reaching those handlers needs the attribute, including records from
    uvicorn and other third-party loggers.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())


def get_session_logger(name: str) -> logging.Logger:
    """Module logger whose records always carry ``session_id``."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
