"""
Thin chat-completion client used by the summarizer.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import openai
from openai import OpenAI

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 1.0
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class LLMError(RuntimeError):
    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


@dataclass
class LLMResponse:
    content: str
    usage: Dict[str, int] = field(default_factory=lambda: {"input_tokens": 0, "output_tokens": 0})

    @property
    def total_tokens(self) -> int:
        return self.usage.get("input_tokens", 0) + self.usage.get("output_tokens", 0)


def is_retryable(exc: Exception) -> bool:
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code in RETRYABLE_STATUS_CODES
    # APITimeoutError is a subclass of APIConnectionError
    return isinstance(exc, openai.APIConnectionError)


class LLMClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        base_url: Optional[str] = None,
        client: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        # SDK-level retries are off; complete() owns the retry policy
        self._client = client or OpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self._sleep = sleep

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> LLMResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        for attempt in range(MAX_ATTEMPTS):
            try:
                completion = self._client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                )
            except openai.OpenAIError as exc:
                retryable = is_retryable(exc)
                if retryable and attempt < MAX_ATTEMPTS - 1:
                    delay = RETRY_DELAY_SECONDS * (2 ** attempt)
                    logger.warning(
                        "LLM request failed (%s); retrying in %.1fs (attempt %d/%d)",
                        exc.__class__.__name__,
                        delay,
                        attempt + 1,
                        MAX_ATTEMPTS,
                    )
                    self._sleep(delay)
                    continue
                raise LLMError(str(exc), retryable=retryable) from exc

            return self._to_response(completion)

        raise LLMError("LLM request failed")  # pragma: no cover

    @staticmethod
    def _to_response(completion: Any) -> LLMResponse:
        choices = getattr(completion, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise LLMError("No text content in response")
        usage = getattr(completion, "usage", None)
        return LLMResponse(
            content=content,
            usage={
                "input_tokens": getattr(usage, "prompt_tokens", 0) or 0,
                "output_tokens": getattr(usage, "completion_tokens", 0) or 0,
            },
        )
