"""Centralized logging configuration for postlint."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final, cast

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

_LOG_LEVEL_ENV: Final[str] = "POSTLINT_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "WARNING"

# Log records go to stderr so JSON reports on stdout stay parseable.
console = Console(stderr=True)

if TYPE_CHECKING:

    class _ManagedRichHandler(RichHandler):
        _postlint_managed: bool

else:
    _ManagedRichHandler = RichHandler


def _resolve_level(override: int | None = None) -> int:
    """Return the logging level from the override or the environment."""
    if override is not None:
        return override
    level_name = os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME).upper()
    return getattr(logging, level_name, logging.WARNING)


def configure_logging(level: int | None = None) -> None:
    """Configure logging once with a Rich handler.

    Calling it again only adjusts the level of the already installed handler.
    """
    root_logger = logging.getLogger()
    resolved = _resolve_level(level)

    managed_handler: _ManagedRichHandler | None = None
    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler) and getattr(handler, "_postlint_managed", False):
            managed_handler = cast(_ManagedRichHandler, handler)
            break

    if managed_handler is None:
        root_logger.handlers.clear()
        handler = _ManagedRichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._postlint_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(resolved)
    logging.captureWarnings(True)
