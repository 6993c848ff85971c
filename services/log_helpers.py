"""Error logging helpers with one call shape per use."""

from __future__ import annotations

import logging
from typing import Any, Mapping


def log_error(logger: logging.Logger, message: str, error: BaseException) -> None:
    logger.error("%s: %s", message, error, exc_info=error)


def log_error_with_context(
    logger: logging.Logger,
    message: str,
    error: BaseException,
    context: Mapping[str, Any],
) -> None:
    """Log *error* with ``key=value`` context appended, sorted by key."""
    details = ", ".join(f"{key}={context[key]!r}" for key in sorted(context))
    logger.error("%s: %s [%s]", message, error, details, extra={"context": dict(context)})
