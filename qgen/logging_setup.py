"""Shared logging setup for the command-line entry points.

Library modules only create loggers; handlers are configured here, once,
by whoever owns the process.
"""

from __future__ import annotations

import logging

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(verbose: bool = False, level: int | str | None = None) -> None:
    """Configure root logging with the shared format.

    Args:
        verbose: If True, sets level to DEBUG. Overrides `level`.
        level: Explicit level (int or name such as "INFO"). Defaults to WARNING.
    """
    if verbose:
        effective_level = logging.DEBUG
    elif isinstance(level, str):
        effective_level = getattr(logging, level.upper(), logging.WARNING)
    elif level is not None:
        effective_level = level
    else:
        effective_level = logging.WARNING

    logging.basicConfig(level=effective_level, format=DEFAULT_LOG_FORMAT)
