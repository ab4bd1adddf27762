"""HTTP completion service backed by a messages-style LLM endpoint."""

from typing import Any, Dict, List, Optional

import httpx

from ...core.config import CompletionSettings
from ...core.exceptions import CompletionServiceError
from ...core.logging import get_logger

SYSTEM_PROMPT = (
    "You are a Java concurrency expert. Answer with one section per file, "
    "exactly in the requested format."
)


class HttpCompletionService:
    """Sends prompts to ``POST {base_url}/v1/messages`` and returns the reply text."""

    def __init__(
        self,
        settings: Optional[CompletionSettings] = None,
        client: Optional[httpx.Client] = None
    ) -> None:
        """Initialize the service.

        Args:
            settings: Endpoint, model and credentials (environment defaults when omitted)
            client: Pre-built httpx client, mainly for tests
        """
        self.settings = settings or CompletionSettings.from_env()
        self._client = client or httpx.Client(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout_seconds,
        )
        self.logger = get_logger("completion.http")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "anthropic-version": self.settings.api_version,
            "content-type": "application/json",
        }
        if self.settings.api_key:
            headers["x-api-key"] = self.settings.api_key
        return headers

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        }

    def submit(self, prompt: str) -> str:
        """Send one prompt and return the completion text.

        Args:
            prompt: Full prompt text

        Returns:
            Concatenated text blocks of the reply

        Raises:
            CompletionServiceError: On transport errors, non-2xx status or malformed body
        """
        self.logger.debug("completion_request", model=self.settings.model, prompt_length=len(prompt))

        try:
            response = self._client.post("/v1/messages", headers=self._headers(), json=self._payload(prompt))
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.logger.warning("completion_http_error", status_code=status)
            raise CompletionServiceError(f"Completion service returned HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            self.logger.warning("completion_transport_error", error=str(e))
            raise CompletionServiceError(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise CompletionServiceError(f"Completion response is not JSON: {e}") from e

        text = self._extract_text(body)
        self.logger.debug("completion_response", response_length=len(text))
        return text

    def _extract_text(self, body: Any) -> str:
        if not isinstance(body, dict) or not isinstance(body.get("content"), list):
            raise CompletionServiceError("Completion response has no content blocks")

        blocks: List[str] = [
            block["text"]
            for block in body["content"]
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
        ]
        if not blocks:
            raise CompletionServiceError("Completion response has no text content")
        return "".join(blocks)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpCompletionService":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
