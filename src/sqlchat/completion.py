"""
Chat completion calls with a bounded number of attempts.

complete() never raises for service failures: it returns either
CompletionSuccess or ExhaustedRetries and the caller decides what to do.
There is no backoff between attempts.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import openai

from .models import Message, Usage

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_S = 120.0


@dataclass(frozen=True)
class CompletionSuccess:
    text: str
    usage: Optional[Usage]
    attempts: int
    elapsed: float


@dataclass(frozen=True)
class ExhaustedRetries:
    attempts: int
    last_error: str


CompletionOutcome = Union[CompletionSuccess, ExhaustedRetries]


def _usage_from(raw) -> Optional[Usage]:
    if raw is None:
        return None
    return Usage(
        prompt_tokens=getattr(raw, "prompt_tokens", None),
        completion_tokens=getattr(raw, "completion_tokens", None),
        total_tokens=getattr(raw, "total_tokens", None),
    )


class CompletionClient:
    def __init__(self, client, model: str, max_retries: int = DEFAULT_MAX_RETRIES,
                 timeout: float = DEFAULT_TIMEOUT_S):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.client = client
        self.model = model
        self.max_retries = max_retries
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "CompletionClient":
        # SDK retries are disabled; max_retries here is the only retry policy
        client = openai.OpenAI(api_key=settings.api_key, max_retries=0)
        return cls(client, settings.model, **kwargs)

    def complete(self, messages: Sequence[Message]) -> CompletionOutcome:
        payload = [m.model_dump() for m in messages]
        last_error = ""
        for attempt in range(1, self.max_retries + 1):
            start = time.perf_counter()
            try:
                response = self.client.chat.completions.create(
                    model=self.model,
                    messages=payload,
                    timeout=self.timeout,
                )
            except openai.OpenAIError as e:
                last_error = str(e) or e.__class__.__name__
                logger.warning("completion attempt %d/%d failed: %s", attempt, self.max_retries, last_error)
                if attempt < self.max_retries:
                    logger.warning("retrying completion")
                else:
                    logger.error("giving up after %d attempts", attempt)
                continue
            elapsed = time.perf_counter() - start
            text = response.choices[0].message.content or ""
            return CompletionSuccess(
                text=text,
                usage=_usage_from(getattr(response, "usage", None)),
                attempts=attempt,
                elapsed=elapsed,
            )
        return ExhaustedRetries(attempts=self.max_retries, last_error=last_error)
