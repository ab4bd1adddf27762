"""Configuration management for the recommendation optimizer.

Settings come from three layers, later layers winning:
model defaults, an optional YAML file, then ``OPTIMIZER_*`` environment
variables.
"""

import os
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from recommendation_optimizer.constants import (
    DEFAULT_MANAGED_COMPONENT_MARKERS,
    BatchDefaults,
    CacheDefaults,
    ClassificationDefaults,
    CompletionDefaults,
    ParallelProcessing,
)
from recommendation_optimizer.core.exceptions import ConfigurationError
from recommendation_optimizer.core.logging import get_logger

ENV_PREFIX = "OPTIMIZER_"


class OptimizerConfig(BaseModel):
    """Tunables for classification, caching and batching."""

    # Unknown keys are usually typos in the YAML file
    model_config = ConfigDict(extra="forbid")

    # Classification
    min_issues_for_ai: int = Field(default=ClassificationDefaults.MIN_ISSUES_FOR_AI, ge=1)
    max_issues_for_ai: int = Field(default=ClassificationDefaults.MAX_ISSUES_FOR_AI, ge=1)
    min_severity_score: int = Field(default=ClassificationDefaults.MIN_SEVERITY_SCORE, ge=0)
    critical_severity_score: int = Field(default=ClassificationDefaults.CRITICAL_SEVERITY_SCORE, ge=1)
    managed_component_markers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MANAGED_COMPONENT_MARKERS)
    )

    # Batching
    max_batch_size: int = Field(default=BatchDefaults.MAX_BATCH_SIZE, ge=1)
    max_issues_per_batch: int = Field(default=BatchDefaults.MAX_ISSUES_PER_BATCH, ge=1)
    max_prompt_length: int = Field(default=BatchDefaults.MAX_PROMPT_LENGTH, ge=1)
    prompt_chars_per_issue: int = Field(default=BatchDefaults.PROMPT_CHARS_PER_ISSUE, ge=0)
    max_recommendations_per_issue: int = Field(default=BatchDefaults.MAX_RECOMMENDATIONS_PER_ISSUE, ge=1)
    max_workers: int = Field(default=ParallelProcessing.DEFAULT_WORKERS, ge=1, le=ParallelProcessing.MAX_WORKERS)

    # Cache
    cache_enabled: bool = True
    cache_ttl_seconds: int = Field(default=CacheDefaults.TTL_SECONDS, ge=0)
    cache_sweep_age_seconds: int = Field(default=CacheDefaults.SWEEP_AGE_SECONDS, ge=0)
    cache_max_size: int = Field(default=CacheDefaults.MAX_SIZE, ge=1)

    enable_ai: bool = True

    @model_validator(mode="after")
    def _check_ranges(self) -> "OptimizerConfig":
        if self.min_issues_for_ai > self.max_issues_for_ai:
            raise ValueError(
                f"min_issues_for_ai ({self.min_issues_for_ai}) exceeds max_issues_for_ai ({self.max_issues_for_ai})"
            )
        return self


class CompletionSettings(BaseModel):
    """Connection settings for the HTTP completion service."""

    base_url: str = CompletionDefaults.BASE_URL
    model: str = CompletionDefaults.MODEL
    api_key: Optional[str] = None
    api_version: str = CompletionDefaults.API_VERSION
    timeout_seconds: float = Field(default=CompletionDefaults.TIMEOUT_SECONDS, gt=0)
    max_tokens: int = Field(default=CompletionDefaults.MAX_TOKENS, ge=1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "CompletionSettings":
        """Build settings, taking the API key from ``ANTHROPIC_API_KEY``."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {"api_key": env.get("ANTHROPIC_API_KEY")}
        if env.get("COMPLETION_BASE_URL"):
            values["base_url"] = env["COMPLETION_BASE_URL"]
        if env.get("COMPLETION_MODEL"):
            values["model"] = env["COMPLETION_MODEL"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _read_config_data(config_path: str) -> Dict[str, Any]:
    if not os.path.exists(config_path):
        raise ConfigurationError(config_path, "File does not exist")

    if not os.path.isfile(config_path):
        raise ConfigurationError(config_path, "Path is not a file")

    try:
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(config_path, f"YAML parsing failed: {e}") from e
    except OSError as e:
        raise ConfigurationError(config_path, f"Failed to read file: {e}") from e

    if config_data is None:
        raise ConfigurationError(config_path, "Config file is empty")

    if not isinstance(config_data, dict):
        raise ConfigurationError(config_path, "Config must be a YAML dictionary")

    section = config_data.get("optimizer", config_data)
    if not isinstance(section, dict):
        raise ConfigurationError(config_path, "'optimizer' section must be a YAML dictionary")
    return section


def load_config(config_path: str) -> OptimizerConfig:
    """Load and validate an optimizer YAML file.

    The settings may sit under a top-level ``optimizer:`` key or at the
    document root. Keys may use dashes or underscores.

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated OptimizerConfig

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    section = _read_config_data(config_path)
    normalized = {str(key).replace("-", "_"): value for key, value in section.items()}

    try:
        return OptimizerConfig(**normalized)
    except ValidationError as e:
        raise ConfigurationError(config_path, f"Validation failed: {e}") from e


def _apply_env_overrides(config: OptimizerConfig, environ: Mapping[str, str]) -> OptimizerConfig:
    logger = get_logger("config")
    updates: Dict[str, Any] = {}

    for name, field_info in OptimizerConfig.model_fields.items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue

        annotation = field_info.annotation
        if annotation is bool:
            updates[name] = raw.strip().lower() in ("1", "true", "yes", "on")
        elif annotation is int:
            try:
                updates[name] = int(raw)
            except ValueError:
                logger.warning("invalid_env_override", variable=f"{ENV_PREFIX}{name.upper()}", value=raw)
        elif name == "managed_component_markers":
            updates[name] = [marker.strip() for marker in raw.split(",") if marker.strip()]

    if not updates:
        return config

    logger.info("env_overrides_applied", fields=sorted(updates))
    try:
        return OptimizerConfig(**{**config.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigurationError("<environment>", f"Validation failed: {e}") from e


def resolve_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> OptimizerConfig:
    """Resolve the effective configuration.

    Precedence: ``OPTIMIZER_*`` env vars > config file > defaults

    Args:
        config_path: Optional YAML file path
        environ: Environment mapping (``os.environ`` by default)

    Returns:
        Effective OptimizerConfig

    Raises:
        ConfigurationError: If the config file is invalid
    """
    config = load_config(config_path) if config_path else OptimizerConfig()
    return _apply_env_overrides(config, os.environ if environ is None else environ)
