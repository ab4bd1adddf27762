"""Prompt rendering for batched completion requests."""
from typing import List

from ...models.batch import Batch

SECTION_HEADER = "FILE {ordinal} RECOMMENDATIONS: {file_path}"


def build_batch_prompt(batch: Batch) -> str:
    """Render one prompt covering every file of a batch.

    Files are numbered from 1 in batch order, and the reply is requested
    as one ``FILE n RECOMMENDATIONS:`` section per file so each section
    can be matched back to its file by ordinal.

    Args:
        batch: Batch to render

    Returns:
        Prompt text
    """
    lines: List[str] = [
        "You are a Java concurrency expert analyzing multiple files in a batch. "
        "Provide specific, actionable recommendations for each file's concurrency issues.",
        "",
        f"BATCH ANALYSIS ({batch.item_count} files, {batch.issue_count} total issues)",
        "=" * 50,
        "",
    ]

    for file_index, result in enumerate(batch.results, start=1):
        lines.append(f"FILE {file_index}: {result.file_path}")
        lines.append("-" * 30)
        if result.issues:
            lines.append("Concurrency Issues:")
            for issue_index, issue in enumerate(result.issues, start=1):
                lines.append(
                    f"  {file_index}.{issue_index}. {issue.type} (Line {issue.line}) - "
                    f"{issue.severity.value}: {issue.description}"
                )
        lines.append("")

    lines.extend([
        "REQUIREMENTS:",
        "- Answer every file, using its number (FILE 1, FILE 2, etc.)",
        "- One numbered recommendation per issue",
        "- Priority for each recommendation (high priority / medium priority / low priority)",
        "- Specific code changes or patterns",
        "- Estimated effort (small effort / medium effort / large effort)",
        "- Keep recommendations concise but actionable",
        "",
        "Format:",
        SECTION_HEADER.format(ordinal="X", file_path="<file path>"),
        "1. [issue] - [priority] priority - [solution] - [effort] effort",
    ])
    return "\n".join(lines) + "\n"
