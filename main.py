"""
Lead bot entry point.

Serves the HTTP API with uvicorn, or runs the offline console chat.

Usage:
    HTTP service:  python main.py
    Console mode:  python main.py console
"""

import logging
import sys

from mavilda.config import settings

logger = logging.getLogger(__name__)


def _run_http_mode() -> None:
    """Start the HTTP service on the configured host and port."""
    import uvicorn

    from mavilda.api import app

    logger.info(
        "%s Bot running on port %d, test interface at /test",
        settings.business.bot_name, settings.server.port,
    )
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


def _run_console_mode() -> None:
    """Start the offline console chat."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_http_mode()
