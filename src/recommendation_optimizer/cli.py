"""Command-line entry point.

Reads analysis results as JSON, attaches recommendations and writes the
annotated results plus optimization statistics as JSON.
"""

import argparse
import json
import os
import sys
from typing import Any, List, Optional

from recommendation_optimizer.constants import LoggingDefaults
from recommendation_optimizer.core.config import CompletionSettings, resolve_config
from recommendation_optimizer.core.exceptions import ConfigurationError
from recommendation_optimizer.core.logging import configure_logging, get_logger
from recommendation_optimizer.core.sentry import init_sentry
from recommendation_optimizer.features.completion import HttpCompletionService, OfflineCompletionService
from recommendation_optimizer.features.orchestration import RecommendationOptimizer
from recommendation_optimizer.models.analysis import AnalysisResult


def _create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recommendation-optimizer",
        description="Attach concurrency recommendations to analysis results with as few LLM calls as possible",
        epilog="""
environment variables:
  OPTIMIZER_<SETTING>  Override any optimizer setting, e.g. OPTIMIZER_MAX_BATCH_SIZE=5
  ANTHROPIC_API_KEY    API key for the completion service
  LOG_LEVEL            Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
  LOG_FILE             Path to log file (logs to stderr by default)
  SENTRY_DSN           Enable Sentry error reporting
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", metavar="RESULTS_JSON", help="JSON file holding a list of analysis results")
    parser.add_argument("--config", type=str, metavar="PATH", help="YAML file with optimizer settings")
    parser.add_argument("--output", "-o", type=str, metavar="PATH", help="Write JSON here instead of stdout")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not call the completion service; AI candidates get generic recommendations",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        metavar="LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Can also be set via LOG_LEVEL env var. Default: INFO",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        default=None,
        help="Path to log file (logs to stderr by default). Can also be set via LOG_FILE env var.",
    )
    return parser


def load_results(path: str) -> List[AnalysisResult]:
    """Read analysis results from a JSON file (a list, or an object with ``results``)."""
    with open(path, "r") as f:
        data: Any = json.load(f)

    if isinstance(data, dict):
        data = data.get("results", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of analysis results")
    return [AnalysisResult.from_dict(item) for item in data]


def main(argv: Optional[List[str]] = None) -> int:
    """Run the optimizer from the command line.

    Args:
        argv: Arguments (``sys.argv[1:]`` when omitted)

    Returns:
        Process exit code
    """
    args = _create_argument_parser().parse_args(argv)

    # Precedence: flags > env vars > defaults
    configure_logging(
        log_level=args.log_level or os.environ.get("LOG_LEVEL", LoggingDefaults.DEFAULT_LEVEL),
        log_file=args.log_file or os.environ.get("LOG_FILE"),
    )
    logger = get_logger("cli")
    init_sentry()

    try:
        config = resolve_config(args.config)
    except ConfigurationError as e:
        logger.error("config_validation_failed", config_path=e.config_path, error=e.message)
        return 2

    try:
        results = load_results(args.input)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error("input_load_failed", path=args.input, error=str(e))
        return 2

    if args.offline or not config.enable_ai:
        run = RecommendationOptimizer(OfflineCompletionService(), config).optimize(results)
    else:
        with HttpCompletionService(CompletionSettings.from_env()) as service:
            run = RecommendationOptimizer(service, config).optimize(results)

    payload = json.dumps(run.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(payload + "\n")
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
