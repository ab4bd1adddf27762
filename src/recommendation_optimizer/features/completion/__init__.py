"""Completion service port and adapters."""

from .http_client import HttpCompletionService
from .service import CompletionService, OfflineCompletionService

__all__ = [
    "CompletionService",
    "HttpCompletionService",
    "OfflineCompletionService",
]
