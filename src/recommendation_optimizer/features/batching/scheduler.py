"""Batch scheduling for completion requests.

Packs AI candidates into groups bounded by file count, cumulative issue
count and estimated prompt length, sends one completion request per
group and distributes the reply back to the individual results.
"""
from typing import List, Optional

from ...core.config import OptimizerConfig
from ...core.exceptions import BatchParseError, CompletionServiceError
from ...core.logging import get_logger
from ...core.sentry import capture_batch_failure
from ...models.analysis import AnalysisResult, Resolution
from ...models.batch import Batch, BatchOutcome
from ..classification.templates import fallback_recommendations
from ..completion.service import CompletionService
from .parser import parse_batch_response
from .prompt import build_batch_prompt


class BatchScheduler:
    """Greedy batch packer and dispatcher."""

    def __init__(self, completion_service: CompletionService, config: Optional[OptimizerConfig] = None) -> None:
        """Initialize the scheduler.

        Args:
            completion_service: Port every batch is submitted to
            config: Packing limits (defaults when omitted)
        """
        self.completion_service = completion_service
        self.config = config or OptimizerConfig()
        self.logger = get_logger("batching.scheduler")

    def prompt_contribution(self, result: AnalysisResult) -> int:
        """Estimate how much prompt a result adds: path length plus a fixed size per issue."""
        return len(result.file_path) + self.config.prompt_chars_per_issue * len(result.issues)

    def _would_overflow(self, batch: Batch, result: AnalysisResult, contribution: int) -> bool:
        if batch.item_count + 1 > self.config.max_batch_size:
            return True
        if batch.issue_count + len(result.issues) > self.config.max_issues_per_batch:
            return True
        if batch.estimated_prompt_length + contribution > self.config.max_prompt_length:
            return True
        return False

    def schedule(self, results: List[AnalysisResult]) -> List[Batch]:
        """Pack results into batches in a single greedy pass.

        A result that would push the current batch over any limit closes
        that batch and opens a new one. A result that exceeds a limit on
        its own is never split or dropped; it forms a batch by itself.
        Concatenating the returned batches reproduces ``results``.

        Args:
            results: AI candidates, in the order they should be sent

        Returns:
            List of batches
        """
        batches: List[Batch] = []
        current = Batch()

        for result in results:
            contribution = self.prompt_contribution(result)
            if current.results and self._would_overflow(current, result, contribution):
                batches.append(current)
                current = Batch()
            current.add(result, contribution)

        if current.results:
            batches.append(current)

        self.logger.info("batches_created", batch_count=len(batches), file_count=len(results))
        return batches

    def request(self, batch: Batch) -> BatchOutcome:
        """Submit one batch and parse the reply without touching the results.

        Every failure is returned as a failed outcome, never raised.

        Args:
            batch: Batch to submit

        Returns:
            BatchOutcome with per-position recommendations or the error
        """
        try:
            response = self.completion_service.submit(build_batch_prompt(batch))
            recommendations = parse_batch_response(batch, response, self.config.max_recommendations_per_issue)
        except (CompletionServiceError, BatchParseError) as e:
            self.logger.warning(
                "batch_request_failed",
                file_count=batch.item_count,
                error_type=type(e).__name__,
                error=str(e),
            )
            return BatchOutcome.failure(e)
        except Exception as e:
            self.logger.error(
                "batch_request_error",
                file_count=batch.item_count,
                error_type=type(e).__name__,
                error=str(e),
            )
            capture_batch_failure(e, batch.item_count, batch.issue_count)
            return BatchOutcome.failure(CompletionServiceError(f"Unexpected completion failure: {e}"))

        return BatchOutcome.success(recommendations)

    def apply(self, batch: Batch, outcome: BatchOutcome) -> None:
        """Write an outcome into the batch's results.

        A failed outcome gives every result one generic recommendation
        per issue; there is no partial success within a batch.
        """
        if not outcome.ok:
            for result in batch.results:
                result.recommendations = fallback_recommendations(result)
                result.resolution = Resolution.FALLBACK
            return

        for position, result in enumerate(batch.results):
            result.recommendations = outcome.recommendations.get(position, [])
            result.resolution = Resolution.BATCHED

    def dispatch(self, batch: Batch) -> BatchOutcome:
        """Send one batch and update its results in place.

        Args:
            batch: Batch to dispatch

        Returns:
            The outcome that was applied
        """
        outcome = self.request(batch)
        self.apply(batch, outcome)

        if outcome.ok:
            self.logger.info("batch_dispatched", file_count=batch.item_count, issue_count=batch.issue_count)
        else:
            self.logger.info("batch_fallback_applied", file_count=batch.item_count, issue_count=batch.issue_count)
        return outcome
