"""Logging setup shared by the CLI and library callers."""
from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "ledger_lens"

# Transport libraries are chatty at DEBUG; keep them at WARNING unless asked.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(debug: bool = False, *, level: Optional[int] = None) -> logging.Logger:
    """Send package log records to stderr through Rich.

    Only the ``ledger_lens`` logger gets a handler, so stdout stays reserved for
    reports and answers. Calling it again just adjusts the level.
    """
    resolved_level = level or (logging.DEBUG if debug else logging.INFO)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved_level)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=debug,
            show_path=debug,
            log_time_format="%H:%M:%S",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    noisy_level = logging.DEBUG if debug else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
    return logger
