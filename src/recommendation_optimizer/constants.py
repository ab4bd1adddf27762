"""Shared constants across the recommendation-optimizer codebase.

This module centralizes magic numbers and configuration values
so the classifier, cache and scheduler agree on their defaults.
"""


class ClassificationDefaults:
    """Default thresholds for result classification."""

    MIN_ISSUES_FOR_AI = 2  # Single simple issues get a template
    MAX_ISSUES_FOR_AI = 20  # Larger files need refactoring, not AI
    MIN_SEVERITY_SCORE = 3  # Weighted severity threshold
    CRITICAL_SEVERITY_SCORE = 8  # Severity score that always goes to AI

    COMPLEXITY_CAP = 10
    DISTINCT_TYPE_WEIGHT = 2
    DEADLOCK_RACE_BONUS = 5
    LEAK_COLLECTION_BONUS = 3

    INTERESTING_PATTERN_COMPLEXITY = 5
    MULTI_ISSUE_COUNT = 3
    MULTI_ISSUE_COMPLEXITY = 4


class CacheDefaults:
    """Pattern cache configuration defaults."""

    TTL_SECONDS = 24 * 60 * 60  # 24 hours
    SWEEP_AGE_SECONDS = 12 * 60 * 60  # 12 hours
    MAX_SIZE = 1000  # Entries before an inline sweep
    CACHE_KEY_LENGTH = 16  # Length of truncated SHA256 hash for cache keys
    MIN_CLASS_COUNT_RATIO = 0.5


class BatchDefaults:
    """Defaults for batch packing."""

    MAX_BATCH_SIZE = 10  # Files per batch
    MAX_ISSUES_PER_BATCH = 50  # Total issues per batch
    MAX_PROMPT_LENGTH = 8000  # Estimated prompt units per batch
    PROMPT_CHARS_PER_ISSUE = 100  # ~100 chars per issue description
    MAX_RECOMMENDATIONS_PER_ISSUE = 3


class ParallelProcessing:
    """Parallel batch dispatch configuration."""

    DEFAULT_WORKERS = 1  # Sequential dispatch
    MAX_WORKERS = 16


class CompletionDefaults:
    """Defaults for the HTTP completion service."""

    BASE_URL = "https://api.anthropic.com"
    MODEL = "claude-3-5-sonnet-latest"
    API_VERSION = "2023-06-01"
    TIMEOUT_SECONDS = 60.0
    MAX_TOKENS = 4096


class LoggingDefaults:
    """Logging configuration defaults."""

    DEFAULT_LEVEL = "INFO"


# Issue types the upstream analyzers emit
class IssueTypes:
    """Issue type identifiers produced by the concurrency analyzers."""

    RACE_CONDITION = "RACE_CONDITION"
    DEADLOCK_RISK = "DEADLOCK_RISK"
    LOCK_ORDERING = "LOCK_ORDERING"
    UNSAFE_COLLECTION = "UNSAFE_COLLECTION"
    ATOMIC_OPPORTUNITY = "ATOMIC_OPPORTUNITY"
    EXECUTOR_NOT_SHUTDOWN = "EXECUTOR_NOT_SHUTDOWN"
    DOUBLE_CHECKED_LOCKING = "DOUBLE_CHECKED_LOCKING"
    UNSAFE_PUBLICATION = "UNSAFE_PUBLICATION"
    COMPARE_AND_SWAP = "COMPARE_AND_SWAP"


DEFAULT_MANAGED_COMPONENT_MARKERS = [
    "Service",
    "Component",
    "Repository",
    "Controller",
    "RestController",
    "Configuration",
]

MANAGED_FILENAME_HINTS = ["service", "controller", "repository", "component"]
