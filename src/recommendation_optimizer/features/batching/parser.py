"""Parsing of batched completion responses.

A response holds one ``FILE n RECOMMENDATIONS:`` section per file. The
explicit ordinal ``n`` (1-based batch position) decides which file a
section belongs to, so reordered sections still land on the right file.
"""
import re
from typing import Dict, List

from ...core.exceptions import BatchParseError
from ...models.analysis import Recommendation, RecommendationEffort, RecommendationPriority
from ...models.batch import Batch

_SECTION_PATTERN = re.compile(r"^[ \t*#]*FILE\s+(\d+)\s+RECOMMENDATIONS\b[^\n]*$", re.IGNORECASE | re.MULTILINE)
_NUMBERED_LINE = re.compile(r"^\s*\d+\s*[.)]\s*(?P<text>\S.*)$")


def split_sections(response: str) -> Dict[int, str]:
    """Map each file ordinal found in ``response`` to its section body.

    When an ordinal appears twice the first section wins.
    """
    headers = list(_SECTION_PATTERN.finditer(response))
    sections: Dict[int, str] = {}

    for index, header in enumerate(headers):
        end = headers[index + 1].start() if index + 1 < len(headers) else len(response)
        ordinal = int(header.group(1))
        sections.setdefault(ordinal, response[header.end():end].strip())

    return sections


def parse_recommendation_line(text: str) -> Recommendation:
    """Build a recommendation from one numbered response line."""
    lowered = text.lower()

    if "high priority" in lowered:
        priority = RecommendationPriority.HIGH
    elif "low priority" in lowered:
        priority = RecommendationPriority.LOW
    else:
        priority = RecommendationPriority.MEDIUM

    if "large effort" in lowered:
        effort = RecommendationEffort.LARGE
    elif "small effort" in lowered:
        effort = RecommendationEffort.SMALL
    else:
        effort = RecommendationEffort.MEDIUM

    return Recommendation(description=text.strip(), priority=priority, effort=effort)


def parse_section(section: str, limit: int) -> List[Recommendation]:
    """Parse the numbered lines of one section, keeping at most ``limit``."""
    recommendations: List[Recommendation] = []
    for line in section.splitlines():
        match = _NUMBERED_LINE.match(line)
        if match:
            recommendations.append(parse_recommendation_line(match.group("text")))
        if len(recommendations) >= limit:
            break
    return recommendations


def parse_batch_response(batch: Batch, response: str, max_per_issue: int) -> Dict[int, List[Recommendation]]:
    """Split a batch response into per-result recommendations.

    Args:
        batch: The batch the response answers
        response: Completion text
        max_per_issue: Cap on recommendations per issue of a result

    Returns:
        Mapping of batch position (0-based) to recommendations

    Raises:
        BatchParseError: If any file's section is missing or has no numbered lines
    """
    sections = split_sections(response)
    if not sections:
        raise BatchParseError("Response contains no FILE sections")

    parsed: Dict[int, List[Recommendation]] = {}
    missing: List[int] = []

    for position, result in enumerate(batch.results):
        section = sections.get(position + 1)
        if section is None:
            missing.append(position + 1)
            continue

        recommendations = parse_section(section, limit=max(1, len(result.issues) * max_per_issue))
        if not recommendations and result.issues:
            missing.append(position + 1)
            continue
        parsed[position] = recommendations

    if missing:
        raise BatchParseError(
            f"Response is missing recommendations for file(s) {', '.join(map(str, missing))}",
            missing_files=missing,
        )
    return parsed
