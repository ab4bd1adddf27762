"""Data models for analyzed files, their issues and recommendations.

Issues come from the upstream concurrency analyzers and are never
changed by the optimizer; recommendations are attached to each
``AnalysisResult`` as it moves through the optimization stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class IssueSeverity(str, Enum):
    """Severity levels for concurrency issues."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def weight(self) -> int:
        """Weight used by the classifier's severity score."""
        return _SEVERITY_WEIGHTS[self]


_SEVERITY_WEIGHTS = {
    IssueSeverity.CRITICAL: 4,
    IssueSeverity.HIGH: 3,
    IssueSeverity.MEDIUM: 2,
    IssueSeverity.LOW: 1,
}


class RecommendationPriority(str, Enum):
    """Priority of a recommendation."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_severity(cls, severity: IssueSeverity) -> "RecommendationPriority":
        return cls(severity.value)


class RecommendationEffort(str, Enum):
    """Estimated effort to apply a recommendation."""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class Resolution(str, Enum):
    """Terminal state of a result once the optimizer has processed it."""

    SKIPPED = "skipped"  # No issues, nothing to recommend
    AUTO = "auto"  # Template recommendations
    CACHED = "cached"  # Served from the pattern cache
    BATCHED = "batched"  # Served by a completion-service batch
    FALLBACK = "fallback"  # Batch failed, generic recommendations


@dataclass(frozen=True)
class Issue:
    """A concurrency defect detected in one file.

    Attributes:
        type: Issue type identifier, e.g. ``RACE_CONDITION``
        severity: Issue severity
        line: Line number of the finding
        description: Human-readable description
        class_name: Class containing the finding, if known
        method_name: Method containing the finding, if known
        title: Short title
        suggested_fix: Fix proposed by the analyzer, if any
    """

    type: str
    severity: IssueSeverity
    line: int
    description: str
    class_name: Optional[str] = None
    method_name: Optional[str] = None
    title: Optional[str] = None
    suggested_fix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "severity": self.severity.value,
            "line": self.line,
            "description": self.description,
            "class_name": self.class_name,
            "method_name": self.method_name,
            "title": self.title,
            "suggested_fix": self.suggested_fix,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            type=data["type"],
            severity=IssueSeverity(str(data["severity"]).upper()),
            line=int(data.get("line", 0)),
            description=data.get("description", ""),
            class_name=data.get("class_name"),
            method_name=data.get("method_name"),
            title=data.get("title"),
            suggested_fix=data.get("suggested_fix"),
        )


@dataclass
class Recommendation:
    """Actionable guidance for one or more issues.

    Attributes:
        description: Recommendation text
        priority: How urgently it should be applied
        effort: Estimated effort
        title: Optional short title
        alternative_approach: Optional alternative fix
        performance_impact: Optional note on runtime cost
    """

    description: str
    priority: RecommendationPriority = RecommendationPriority.MEDIUM
    effort: RecommendationEffort = RecommendationEffort.MEDIUM
    title: Optional[str] = None
    alternative_approach: Optional[str] = None
    performance_impact: Optional[str] = None

    def copy(self) -> "Recommendation":
        """Return an independent copy of this recommendation."""
        return Recommendation(
            description=self.description,
            priority=self.priority,
            effort=self.effort,
            title=self.title,
            alternative_approach=self.alternative_approach,
            performance_impact=self.performance_impact,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "description": self.description,
            "priority": self.priority.value,
            "effort": self.effort.value,
            "title": self.title,
            "alternative_approach": self.alternative_approach,
            "performance_impact": self.performance_impact,
        }


@dataclass
class SourceFile:
    """Structural facts about one source file, as produced by the upstream parser.

    Attributes:
        file_path: Path of the file
        class_names: Classes declared in the file
        imports: Imported names
        component_markers: Component annotations found on the file's classes
    """

    file_path: str
    class_names: List[str] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    component_markers: Set[str] = field(default_factory=set)


@dataclass
class AnalysisResult:
    """Analysis outcome for a single file.

    ``issues`` is final once the result reaches the optimizer;
    ``recommendations`` and ``resolution`` are filled in by it.
    """

    file_path: str
    issues: List[Issue] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    analyzed_classes: int = 0
    imports: Set[str] = field(default_factory=set)
    component_markers: Set[str] = field(default_factory=set)
    has_errors: bool = False
    error_message: Optional[str] = None
    resolution: Optional[Resolution] = None

    @property
    def file_name(self) -> str:
        """Last path component of ``file_path``."""
        return self.file_path.replace("\\", "/").rsplit("/", 1)[-1]

    @property
    def thread_safe(self) -> bool:
        """True when no HIGH or CRITICAL issue was found."""
        return not any(
            issue.severity in (IssueSeverity.HIGH, IssueSeverity.CRITICAL)
            for issue in self.issues
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "file_path": self.file_path,
            "issues": [issue.to_dict() for issue in self.issues],
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "analyzed_classes": self.analyzed_classes,
            "thread_safe": self.thread_safe,
            "has_errors": self.has_errors,
            "error_message": self.error_message,
            "resolution": self.resolution.value if self.resolution else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Build a result from its serialized form (recommendations are not restored)."""
        return cls(
            file_path=data["file_path"],
            issues=[Issue.from_dict(item) for item in data.get("issues", [])],
            analyzed_classes=int(data.get("analyzed_classes", 0)),
            imports=set(data.get("imports", [])),
            component_markers=set(data.get("component_markers", [])),
        )
