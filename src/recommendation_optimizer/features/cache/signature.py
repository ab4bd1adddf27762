"""Pattern keys for issue sets.

Two files with the same *shape* of problems (same issue types and
severities, descriptions differing only in class names, variable names
and line numbers) get the same key, whatever order their issues are in.
"""
import hashlib
import re
from typing import Iterable

from ...constants import CacheDefaults
from ...core.logging import get_logger
from ...models.analysis import Issue

# One pass so replacement tokens are never rewritten again.
_TOKEN_PATTERN = re.compile(
    r"(?P<line>\b[Ll]ine \d+\b)"
    r"|(?P<class_name>\b[A-Z][a-zA-Z0-9]*\b)"
    r"|(?P<variable>\b[a-z][a-zA-Z0-9]*\b)"
    r"|(?P<number>\d+)"
)

_REPLACEMENTS = {
    "line": "line N",
    "class_name": "CLASS",
    "variable": "variable",
    "number": "N",
}


def normalize_description(description: str) -> str:
    """Strip file-specific nouns from an issue description.

    Capitalized identifiers become ``CLASS``, lowercase identifiers
    ``variable``, ``line <n>`` becomes ``line N`` and other digit runs
    ``N``; the result is lowercased and trimmed.

    Args:
        description: Raw issue description

    Returns:
        Normalized description
    """
    if not description:
        return ""

    normalized = _TOKEN_PATTERN.sub(lambda m: _REPLACEMENTS[m.lastgroup or "number"], description)
    return normalized.lower().strip()


def issue_signature(issue: Issue) -> str:
    """``type:severity:normalizedDescription`` for one issue."""
    return f"{issue.type}:{issue.severity.value}:{normalize_description(issue.description)}"


def _simple_hash(text: str) -> str:
    # 32-bit polynomial string hash, stable across processes
    value = 0
    for char in text:
        value = (31 * value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)


def pattern_key(issues: Iterable[Issue]) -> str:
    """Compute the order-independent cache key of an issue set.

    Signatures are sorted and joined with ``|`` before hashing with
    SHA-256; the first 16 hex characters form the key. If SHA-256 is
    unavailable a 32-bit string hash is used instead, and unrelated
    issue sets may then collide.

    Args:
        issues: Issues of one file

    Returns:
        Pattern key
    """
    pattern = "|".join(sorted(issue_signature(issue) for issue in issues))

    try:
        digest = hashlib.new("sha256")
    except ValueError:
        get_logger("cache.signature").warning("sha256_unavailable", fallback="string_hash")
        return _simple_hash(pattern)

    digest.update(pattern.encode("utf-8"))
    return digest.hexdigest()[:CacheDefaults.CACHE_KEY_LENGTH]
