"""Structured logging for the recommendation optimizer."""
import sys
from typing import Any, Dict, List, Optional

import structlog

_LEVELS: Dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_output: bool = True
) -> None:
    """Configure structlog for the optimizer.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logging (stderr by default)
        json_output: Render JSON lines; False gives the console renderer
    """
    numeric_level = _LEVELS.get(log_level.upper(), 20)

    renderer: Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr if log_file is None else open(log_file, 'a')),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to a component name.

    Args:
        name: Dotted component name, e.g. ``cache.pattern_cache``

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_run_context(run_id: str) -> None:
    """Attach ``run_id`` to every log event emitted during one optimization run."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    structlog.contextvars.unbind_contextvars("run_id")
