"""Completion service port."""
from typing import Protocol, runtime_checkable

from ...core.exceptions import CompletionServiceError


@runtime_checkable
class CompletionService(Protocol):
    """Synchronous text-completion boundary.

    ``submit`` returns the completion text for a prompt. Implementations
    raise ``CompletionServiceError`` for any network, timeout, auth or
    rate-limit problem.
    """

    def submit(self, prompt: str) -> str:
        ...


class OfflineCompletionService:
    """Completion service that is never reachable.

    Used when AI analysis is disabled: every batch ends in the fallback.
    """

    def submit(self, prompt: str) -> str:
        raise CompletionServiceError("Completion service disabled (offline mode)")
