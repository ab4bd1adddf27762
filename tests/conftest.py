"""Shared pytest fixtures for the recommendation-optimizer test suite.

This module provides factories for issues and analysis results, a
scripted completion service and a manual clock for cache expiry tests.
"""

import re
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from recommendation_optimizer.core.exceptions import CompletionServiceError  # noqa: E402
from recommendation_optimizer.models.analysis import (  # noqa: E402
    AnalysisResult,
    Issue,
    IssueSeverity,
)

_PROMPT_FILE_LINE = re.compile(r"^FILE (\d+): (.+)$", re.MULTILINE)


# ============================================================================
# Scripted collaborators
# ============================================================================

Reply = Union[str, Exception, Callable[[str], str]]


class FakeCompletionService:
    """Completion service that records prompts and plays back scripted replies.

    Without scripted replies every prompt is answered with one
    well-formed section per file, one recommendation per issue.
    """

    def __init__(self, replies: Optional[Sequence[Reply]] = None) -> None:
        self.replies: List[Reply] = list(replies or [])
        self.prompts: List[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    def submit(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            return well_formed_reply(prompt)

        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


def well_formed_reply(prompt: str) -> str:
    """Answer every file of a batch prompt with one line per issue."""
    sections = []
    for match in _PROMPT_FILE_LINE.finditer(prompt):
        ordinal, path = match.group(1), match.group(2)
        issue_lines = re.findall(rf"^  {ordinal}\.\d+\. (\S+)", prompt, re.MULTILINE)
        lines = [
            f"{index}. Fix {issue_type} in {path} - high priority - use a lock - small effort"
            for index, issue_type in enumerate(issue_lines, start=1)
        ]
        sections.append(f"FILE {ordinal} RECOMMENDATIONS: {path}\n" + "\n".join(lines))
    return "\n\n".join(sections)


class ManualClock:
    """Clock whose time only moves when the test says so."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Factories
# ============================================================================

def make_issue(
    issue_type: str = "RACE_CONDITION",
    severity: IssueSeverity = IssueSeverity.MEDIUM,
    line: int = 10,
    description: str = "Field counter accessed without synchronization",
) -> Issue:
    return Issue(type=issue_type, severity=severity, line=line, description=description)


def make_result(
    file_path: str = "src/main/java/com/acme/Worker.java",
    issues: Optional[List[Issue]] = None,
    imports: Optional[set] = None,
    analyzed_classes: int = 1,
    component_markers: Optional[set] = None,
) -> AnalysisResult:
    return AnalysisResult(
        file_path=file_path,
        issues=list(issues or []),
        imports=set(imports or ()),
        analyzed_classes=analyzed_classes,
        component_markers=set(component_markers or ()),
    )


@pytest.fixture
def issue_factory():
    """Factory for Issue objects with sensible defaults."""
    return make_issue


@pytest.fixture
def result_factory():
    """Factory for AnalysisResult objects with sensible defaults."""
    return make_result


@pytest.fixture
def fake_service() -> FakeCompletionService:
    """Completion service answering every batch with well-formed sections."""
    return FakeCompletionService()


@pytest.fixture
def failing_service() -> FakeCompletionService:
    """Completion service that is always unreachable."""

    class _Failing(FakeCompletionService):
        def submit(self, prompt: str) -> str:
            self.prompts.append(prompt)
            raise CompletionServiceError("connection refused")

    return _Failing()


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()
