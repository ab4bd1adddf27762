"""Tests for batch prompt rendering and response parsing."""

import pytest

from recommendation_optimizer.core.exceptions import BatchParseError
from recommendation_optimizer.features.batching import (
    build_batch_prompt,
    parse_batch_response,
    parse_recommendation_line,
    split_sections,
)
from recommendation_optimizer.models.analysis import RecommendationEffort, RecommendationPriority
from recommendation_optimizer.models.batch import Batch


@pytest.fixture
def two_file_batch(result_factory, issue_factory):
    batch = Batch()
    batch.add(result_factory(file_path="src/A.java", issues=[issue_factory(line=1)]), 100)
    batch.add(result_factory(file_path="src/B.java", issues=[issue_factory(line=2), issue_factory(line=3)]), 200)
    return batch


class TestPrompt:
    """Tests for build_batch_prompt."""

    def test_prompt_numbers_files_and_issues(self, two_file_batch):
        prompt = build_batch_prompt(two_file_batch)
        assert "BATCH ANALYSIS (2 files, 3 total issues)" in prompt
        assert "FILE 1: src/A.java" in prompt
        assert "FILE 2: src/B.java" in prompt
        assert "  2.2. RACE_CONDITION (Line 3) - MEDIUM:" in prompt
        assert "FILE X RECOMMENDATIONS: <file path>" in prompt


class TestSplitSections:
    """Tests for split_sections."""

    def test_sections_keyed_by_ordinal(self):
        response = "FILE 2 RECOMMENDATIONS: b\n1. two\n\nFILE 1 RECOMMENDATIONS: a\n1. one\n"
        sections = split_sections(response)
        assert sections == {2: "1. two", 1: "1. one"}

    def test_markdown_headers_are_accepted(self):
        response = "## FILE 1 RECOMMENDATIONS: a\n1. one\n**FILE 2 RECOMMENDATIONS:**\n1. two"
        assert set(split_sections(response)) == {1, 2}

    def test_first_duplicate_wins(self):
        response = "FILE 1 RECOMMENDATIONS:\n1. first\nFILE 1 RECOMMENDATIONS:\n1. second"
        assert split_sections(response) == {1: "1. first"}


class TestParseRecommendationLine:
    """Tests for priority and effort extraction."""

    def test_high_priority_small_effort(self):
        rec = parse_recommendation_line("Guard map - high priority - use ConcurrentHashMap - small effort")
        assert rec.priority == RecommendationPriority.HIGH
        assert rec.effort == RecommendationEffort.SMALL

    def test_low_priority_large_effort(self):
        rec = parse_recommendation_line("Refactor locks - Low Priority - Large Effort")
        assert rec.priority == RecommendationPriority.LOW
        assert rec.effort == RecommendationEffort.LARGE

    def test_defaults_to_medium(self):
        rec = parse_recommendation_line("  Do something  ")
        assert rec.description == "Do something"
        assert rec.priority == RecommendationPriority.MEDIUM
        assert rec.effort == RecommendationEffort.MEDIUM


class TestParseBatchResponse:
    """Tests for parse_batch_response."""

    def test_sections_map_to_results(self, two_file_batch):
        response = (
            "FILE 1 RECOMMENDATIONS: src/A.java\n1. Fix A - high priority\n\n"
            "FILE 2 RECOMMENDATIONS: src/B.java\n1. Fix B1\n2. Fix B2 - small effort\n"
        )
        parsed = parse_batch_response(two_file_batch, response, max_per_issue=3)
        assert [rec.description for rec in parsed[0]] == ["Fix A - high priority"]
        assert [rec.description for rec in parsed[1]] == ["Fix B1", "Fix B2 - small effort"]

    def test_reordered_sections_still_map_by_ordinal(self, two_file_batch):
        response = (
            "FILE 2 RECOMMENDATIONS: src/B.java\n1. Fix B\n\n"
            "FILE 1 RECOMMENDATIONS: src/A.java\n1. Fix A\n"
        )
        parsed = parse_batch_response(two_file_batch, response, max_per_issue=3)
        assert parsed[0][0].description == "Fix A"
        assert parsed[1][0].description == "Fix B"

    def test_missing_section_raises(self, two_file_batch):
        response = "FILE 1 RECOMMENDATIONS: src/A.java\n1. Fix A\n"
        with pytest.raises(BatchParseError) as exc_info:
            parse_batch_response(two_file_batch, response, max_per_issue=3)
        assert exc_info.value.missing_files == [2]

    def test_empty_section_raises(self, two_file_batch):
        response = "FILE 1 RECOMMENDATIONS:\n1. Fix A\nFILE 2 RECOMMENDATIONS:\nnothing numbered here\n"
        with pytest.raises(BatchParseError):
            parse_batch_response(two_file_batch, response, max_per_issue=3)

    def test_no_sections_raises(self, two_file_batch):
        with pytest.raises(BatchParseError, match="no FILE sections"):
            parse_batch_response(two_file_batch, "I cannot help with that.", max_per_issue=3)

    def test_recommendations_capped_per_issue(self, two_file_batch):
        lines = "\n".join(f"{i}. Fix {i}" for i in range(1, 10))
        response = f"FILE 1 RECOMMENDATIONS:\n{lines}\nFILE 2 RECOMMENDATIONS:\n{lines}\n"
        parsed = parse_batch_response(two_file_batch, response, max_per_issue=2)
        assert len(parsed[0]) == 2
        assert len(parsed[1]) == 4
