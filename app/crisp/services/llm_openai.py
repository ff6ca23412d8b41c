"""
Purpose: Thin client wrapper around OpenAI.
One place for auth, retries, model options and usage normalization, so the
question and scoring services only ever see (text, meta).

Testing: Mock SDK calls; assert it maps usage and retries transient errors.
"""

from __future__ import annotations
import logging
import time
from typing import Optional

from openai import APIError, APITimeoutError, OpenAI, RateLimitError

from ..models import LLMSettings

logger = logging.getLogger(__name__)

RETRY_DELAYS = (0.5, 1.0, 2.0)


class OpenAILLMClient:
    def __init__(self, api_key: str, *, client: Optional[OpenAI] = None):
        self.api_key = api_key
        if not self.api_key and client is None:
            raise RuntimeError("Missing OPENAI_API_KEY")
        try:
            self.client = client or OpenAI(api_key=self.api_key)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize OpenAI client: {e}") from e

    def _with_retries(self, fn, *args, **kwargs):
        for delay in RETRY_DELAYS:
            try:
                return fn(*args, **kwargs)
            except (RateLimitError, APITimeoutError, APIError) as e:
                logger.warning("OpenAI call failed (%s); retrying in %.1fs", e, delay)
                time.sleep(delay)
        return fn(*args, **kwargs)

    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ) -> tuple[str, dict]:
        payload = []
        if system:
            payload.append({"role": "system", "content": system})
        payload.extend(messages)

        kwargs = dict(
            model=settings.model,
            messages=payload,
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_tokens=settings.max_tokens,
            frequency_penalty=settings.frequency_penalty,
            presence_penalty=settings.presence_penalty,
        )
        if settings.response_format:
            kwargs["response_format"] = settings.response_format

        cc = self._with_retries(self.client.chat.completions.create, **kwargs)
        text = cc.choices[0].message.content or ""
        usage = getattr(cc, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) if usage else 0
        tokens_out = getattr(usage, "completion_tokens", 0) if usage else 0
        return text, {
            "model": cc.model,
            "tokens_in": tokens_in,
            "tokens_out": tokens_out,
        }
