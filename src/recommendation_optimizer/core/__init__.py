"""Core infrastructure for the recommendation optimizer."""

from recommendation_optimizer.core.config import (
    CompletionSettings,
    OptimizerConfig,
    load_config,
    resolve_config,
)
from recommendation_optimizer.core.exceptions import (
    AnalyzerFailure,
    BatchParseError,
    CompletionServiceError,
    ConfigurationError,
    OptimizerError,
)
from recommendation_optimizer.core.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)
from recommendation_optimizer.core.sentry import (
    capture_batch_failure,
    init_sentry,
)

__all__ = [
    # Exceptions
    "OptimizerError",
    "ConfigurationError",
    "AnalyzerFailure",
    "CompletionServiceError",
    "BatchParseError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_run_context",
    "clear_run_context",
    # Config
    "OptimizerConfig",
    "CompletionSettings",
    "load_config",
    "resolve_config",
    # Sentry
    "init_sentry",
    "capture_batch_failure",
]
