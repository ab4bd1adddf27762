"""Context fingerprints deciding whether cached recommendations may be reused."""
from typing import Iterable

from ...constants import CacheDefaults
from ...models.analysis import AnalysisResult
from ...models.cache import ContextMetadata

# Checked in order; first family with a matching import wins
FRAMEWORK_FAMILIES = [
    ("SPRING", ("springframework",)),
    ("CDI", ("jakarta.enterprise", "javax.enterprise")),
    ("REACTIVE", ("reactor", "rxjava")),
]

STANDARD_FAMILY = "STANDARD"


def detect_framework_family(imports: Iterable[str]) -> str:
    """Name the framework family the imports belong to, ``STANDARD`` if none."""
    imported = list(imports)
    for family, needles in FRAMEWORK_FAMILIES:
        if any(needle in name for name in imported for needle in needles):
            return family
    return STANDARD_FAMILY


def context_from_result(result: AnalysisResult) -> ContextMetadata:
    """Derive the cache context of an analysis result."""
    return ContextMetadata(
        framework_family=detect_framework_family(result.imports),
        class_count=result.analyzed_classes,
    )


def is_context_compatible(cached: ContextMetadata, current: ContextMetadata) -> bool:
    """Check whether recommendations cached under ``cached`` fit ``current``.

    The framework family must match. When both class counts are known
    the smaller must be at least half the larger.
    """
    if cached.framework_family != current.framework_family:
        return False

    if cached.class_count > 0 and current.class_count > 0:
        ratio = min(cached.class_count, current.class_count) / max(cached.class_count, current.class_count)
        if ratio < CacheDefaults.MIN_CLASS_COUNT_RATIO:
            return False

    return True
