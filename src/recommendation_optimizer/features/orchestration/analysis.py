"""Traditional analysis phase.

Runs the externally supplied concurrency analyzers over parsed source
files. A failing analyzer only costs the issues it would have found for
that one file.
"""
from typing import List, Protocol, Sequence

from ...core.exceptions import AnalyzerFailure
from ...core.logging import get_logger
from ...models.analysis import AnalysisResult, Issue, SourceFile


class Analyzer(Protocol):
    """An issue detector over one parsed source file."""

    name: str

    def analyze(self, source: SourceFile) -> List[Issue]:
        ...


def _safe_analyze(analyzer: Analyzer, source: SourceFile) -> List[Issue]:
    logger = get_logger("orchestration.analysis")
    try:
        return list(analyzer.analyze(source) or [])
    except Exception as e:
        failure = AnalyzerFailure(source.file_path, getattr(analyzer, "name", type(analyzer).__name__), e)
        logger.warning(
            "analyzer_failed",
            file=failure.file_path,
            analyzer=failure.analyzer,
            error=str(e),
        )
        return []


def analyze_source(source: SourceFile, analyzers: Sequence[Analyzer]) -> AnalysisResult:
    """Run every analyzer over one file and collect the issues."""
    issues: List[Issue] = []
    for analyzer in analyzers:
        issues.extend(_safe_analyze(analyzer, source))

    return AnalysisResult(
        file_path=source.file_path,
        issues=issues,
        analyzed_classes=len(source.class_names),
        imports=set(source.imports),
        component_markers=set(source.component_markers),
    )


def run_analyzers(sources: Sequence[SourceFile], analyzers: Sequence[Analyzer]) -> List[AnalysisResult]:
    """Analyze all files, producing one result per file in input order.

    Args:
        sources: Parsed source files
        analyzers: Analyzers to run on each file

    Returns:
        Analysis results; a file whose result cannot be built gets an
        error result with no issues
    """
    logger = get_logger("orchestration.analysis")
    results: List[AnalysisResult] = []

    for source in sources:
        try:
            results.append(analyze_source(source, analyzers))
        except Exception as e:
            logger.error("file_analysis_failed", file=source.file_path, error=str(e))
            results.append(AnalysisResult(
                file_path=source.file_path,
                has_errors=True,
                error_message=str(e),
            ))

    logger.info(
        "traditional_analysis_complete",
        file_count=len(results),
        issue_count=sum(len(result.issues) for result in results),
    )
    return results
