"""Sentry error tracking integration for the recommendation optimizer."""
import os
from typing import Any

import sentry_sdk

from recommendation_optimizer.core.logging import get_logger


def init_sentry(service_name: str = "recommendation-optimizer") -> bool:
    """Initialize Sentry when ``SENTRY_DSN`` is set.

    Args:
        service_name: Service tag attached to every event

    Returns:
        True if Sentry was initialized
    """
    def _tag_event(event: Any, hint: Any) -> Any:
        event.setdefault("tags", {})
        event["tags"]["service"] = service_name
        event["tags"]["component"] = "optimizer"
        return event

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT", "development")
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=1.0 if environment == "development" else 0.1,
        # Prompts carry source snippets
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        before_send=_tag_event,
    )
    sentry_sdk.set_tag("service", service_name)
    sentry_sdk.set_tag("component", "optimizer")

    get_logger("sentry").info("sentry_initialized", service=service_name, environment=environment)
    return True


def capture_batch_failure(error: BaseException, file_count: int, issue_count: int) -> None:
    """Report a failed completion batch; a no-op unless Sentry is initialized."""
    sentry_sdk.capture_exception(error, extras={
        "operation": "dispatch_batch",
        "file_count": file_count,
        "issue_count": issue_count,
    })
