"""Logging infrastructure.

Basic usage:
    import logging

    from relaykit.infra.logging import set_log_context, setup_logging

    setup_logging()  # reads LOG_* settings
    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Resolving connection")  # includes request_id

    # Lazy evaluation for expensive debug messages
    from relaykit.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Rows: {dump(rows)}")  # only runs if DEBUG enabled
"""

from relaykit.infra.logging.config import configure_logging, setup_logging
from relaykit.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from relaykit.infra.logging.formatters import JSONFormatter
from relaykit.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
]
