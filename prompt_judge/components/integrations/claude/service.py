"""
Anthropic Claude client for prompt analysis.

Wraps the Messages API with a per-call timeout, bounded retry with
exponential backoff for transient failures, and a model fallback chain.
All failures surface as ``ExternalServiceError`` subclasses.
"""

import logging
import time
from typing import Callable

import anthropic
from anthropic import Anthropic

from .model_fallback import candidate_models_for, is_model_not_found_error
from ....platform.config import settings
from ....shared.errors import ExternalServiceError, ModelNotConfiguredError, ModelTimeoutError

logger = logging.getLogger("prompt_judge.claude")

_RETRYABLE_STATUS_CODES = {408, 409, 429, 500, 502, 503, 504, 529}


class AnalysisModelClient:
    """Sends analysis instructions to Claude and returns the raw text reply."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        """
        Args:
            api_key: Anthropic API key. Defaults to ``ANTHROPIC_API_KEY``.
            model: Primary model. Defaults to ``CLAUDE_MODEL``.

        Raises:
            ModelNotConfiguredError: when no API key is available.
        """
        key = (api_key if api_key is not None else settings.ANTHROPIC_API_KEY or "").strip()
        if not key:
            raise ModelNotConfiguredError("ANTHROPIC_API_KEY is not set")
        # Retries are handled here so backoff and logging stay in one place.
        self.client = Anthropic(api_key=key, timeout=settings.ANALYSIS_TIMEOUT_SECONDS, max_retries=0)
        self.model = model or settings.resolved_claude_model
        self.max_tokens = settings.ANALYSIS_MAX_TOKENS
        self.max_retries = max(0, settings.ANALYSIS_MAX_RETRIES)
        self.backoff_seconds = max(0.0, settings.ANALYSIS_RETRY_BACKOFF_SECONDS)

    def _sleep_before_retry(self, attempt: int) -> None:
        delay = self.backoff_seconds * (2 ** attempt)
        if delay > 0:
            time.sleep(delay)

    def _create(self, model: str, instruction: str, system: str) -> str:
        response = self.client.messages.create(
            model=model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": instruction}],
        )
        parts = [getattr(block, "text", "") for block in (response.content or [])]
        text = "".join(part for part in parts if part)
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                "Claude analysis response received (model=%s, input_tokens=%s, output_tokens=%s)",
                model,
                getattr(usage, "input_tokens", None),
                getattr(usage, "output_tokens", None),
            )
        return text

    def _complete_with_model(self, model: str, instruction: str, system: str) -> str:
        last_exc: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._create(model, instruction, system)
            except anthropic.APITimeoutError as exc:
                last_exc = exc
                logger.warning("Claude request timed out (model=%s, attempt=%d)", model, attempt + 1)
                if attempt < self.max_retries:
                    self._sleep_before_retry(attempt)
                    continue
                raise ModelTimeoutError(f"Claude request timed out after {attempt + 1} attempts") from exc
            except anthropic.APIConnectionError as exc:
                last_exc = exc
                logger.warning("Claude connection error (model=%s, attempt=%d): %s", model, attempt + 1, exc)
            except anthropic.APIStatusError as exc:
                if is_model_not_found_error(exc):
                    raise
                if exc.status_code not in _RETRYABLE_STATUS_CODES:
                    raise ExternalServiceError(f"Claude rejected the request ({exc.status_code})") from exc
                last_exc = exc
                logger.warning(
                    "Claude returned retryable status %s (model=%s, attempt=%d)",
                    exc.status_code,
                    model,
                    attempt + 1,
                )
            if attempt < self.max_retries:
                self._sleep_before_retry(attempt)
        raise ExternalServiceError(f"Claude request failed after {self.max_retries + 1} attempts") from last_exc

    def complete(self, instruction: str, system: str) -> str:
        """Send one instruction and return the model's text output.

        Raises:
            ModelTimeoutError: every attempt timed out.
            ExternalServiceError: provider or network failure, or empty output.
        """
        models = candidate_models_for(self.model)
        logger.info("Sending analysis request to Claude (models=%s, chars=%d)", models, len(instruction))
        for index, model in enumerate(models):
            try:
                text = self._complete_with_model(model, instruction, system)
            except anthropic.APIStatusError as exc:
                if is_model_not_found_error(exc) and index + 1 < len(models):
                    logger.warning("Claude model %s unavailable, falling back to %s", model, models[index + 1])
                    continue
                raise ExternalServiceError(f"Claude model {model} is unavailable") from exc
            if not text.strip():
                raise ExternalServiceError("Claude returned an empty response")
            return text
        raise ExternalServiceError("No Claude model available")


def get_analysis_client_factory() -> Callable[[], AnalysisModelClient]:
    """FastAPI dependency returning a client constructor.

    Construction is deferred so input validation runs before a missing API key
    is reported. Tests override this with a factory for a fake client.
    """
    return AnalysisModelClient
