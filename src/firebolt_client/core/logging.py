"""Logging configuration using structlog.

The library only emits log events. Until an application calls
setup_logging(), loggers drop everything below WARNING so that importing
firebolt_client never prints debug chatter. Output goes to stderr so result
data written to stdout by the embedding program stays clean.
"""

import logging
import sys
from typing import Any

import structlog

_LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

_configured = False


class _LazyStderrFactory:
    """Resolve sys.stderr when a logger is created, not at configure() time.

    pytest's capsys swaps sys.stderr per test, so a handle captured once
    during configure() goes stale between tests.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def _processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog for the Firebolt client.

    Args:
        verbose: If True, emit debug events (requests, header mutations,
            token refreshes). Otherwise INFO and above.
    """
    global _configured
    log_level = "debug" if verbose else "info"

    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(_LOG_LEVELS[log_level]),
        context_class=dict,
        logger_factory=_LazyStderrFactory(),
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger, optionally bound with a name.

    Call this inside functions, never at module level, so that a later
    setup_logging() call takes effect.
    """
    if _configured:
        logger = structlog.get_logger()
    else:
        logger = structlog.wrap_logger(
            _LazyStderrFactory()(),
            processors=_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
            context_class=dict,
        )
    if name:
        logger = logger.bind(logger=name)
    return logger
