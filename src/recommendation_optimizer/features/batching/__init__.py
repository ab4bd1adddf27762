"""Batched completion requests feature."""

from .parser import parse_batch_response, parse_recommendation_line, split_sections
from .prompt import build_batch_prompt
from .scheduler import BatchScheduler

__all__ = [
    "BatchScheduler",
    "build_batch_prompt",
    "parse_batch_response",
    "parse_recommendation_line",
    "split_sections",
]
