"""Language model HTTP client (Gemini generateContent) with retry on transient failures"""

import asyncio
import logging
import httpx
from finance_tracker.config import settings
from finance_tracker.domain.exceptions import LLMNotConfiguredError, LLMServiceError
from finance_tracker.infrastructure.observability.metrics import llm_failure_counter, llm_latency_histogram

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class LLMClient:
    """Client for the hosted language model behind insights and chat"""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.llm_api_key
        self.base_url = base_url or settings.llm_api_base
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.llm_max_retries
        self.backoff_base = settings.llm_backoff_base
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the model's text response.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1)
        - Retries on 429/5xx and network failures, not on other 4xx

        Raises:
            LLMNotConfiguredError: No API key set
            LLMServiceError: On timeout, HTTP errors, or a response without text
        """
        if not self.configured:
            raise LLMNotConfiguredError("Language model API key is not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with llm_latency_histogram.time():
                        response = await client.post(url, params={"key": self.api_key}, json=body)
                        response.raise_for_status()
                    return self._extract_text(response)

                except httpx.HTTPStatusError as e:
                    llm_failure_counter.inc()
                    attempt += 1
                    status = e.response.status_code
                    if status not in RETRYABLE_STATUS or attempt >= self.max_retries:
                        raise LLMServiceError(f"Language model API error: {status}") from e

                except httpx.TimeoutException as e:
                    llm_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise LLMServiceError(f"Language model timeout after {self.timeout}s") from e

                except httpx.RequestError as e:
                    llm_failure_counter.inc()
                    attempt += 1
                    if attempt >= self.max_retries:
                        raise LLMServiceError(f"Language model unreachable: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning("Retrying language model call", extra={"attempt": attempt, "backoff": backoff})
                await asyncio.sleep(backoff)

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            parts = response.json()["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            raise LLMServiceError(f"Invalid response from language model: {e}") from e
        if not text.strip():
            raise LLMServiceError("Empty response from language model")
        return text
