"""Async OpenAI chat-completion wrapper with rate-limit retries."""

from __future__ import annotations

import asyncio
import logging
import random
import re
from typing import Any

from openai import AsyncOpenAI, APIConnectionError, APITimeoutError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

# Retry settings for rate-limit (429) and transient connection errors
_MAX_RETRIES = 5
_BASE_DELAY = 2  # seconds, floor for exponential backoff


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from an OpenAI rate limit error.

    Checks the ``Retry-After`` header first, then falls back to parsing
    the "Please try again in Xs / Xms" substring from the error message.
    Returns seconds as a float, or None if not found.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    return None


def build_messages(system: str, prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


class ChatClient:
    """Thin async wrapper around the OpenAI SDK.

    ``complete`` sends one chat request and returns the assistant text
    (empty string when the model returned no content).
    """

    def __init__(self, api_key: str | None = None) -> None:
        self._client = AsyncOpenAI(api_key=api_key)

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff on 429 and connection errors.

        Waits at least as long as OpenAI's suggested retry-after time and
        adds ±25% jitter. Fails immediately when the request itself is too
        large for the model.
        """
        for attempt in range(_MAX_RETRIES):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                if "request too large" in msg or "context_length_exceeded" in msg:
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise
                if attempt == _MAX_RETRIES - 1:
                    raise

                backoff = _BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)

                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d, suggested=%.1fs): %s",
                    delay, attempt + 1, _MAX_RETRIES, suggested or 0.0, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _MAX_RETRIES - 1:
                    raise
                backoff = _BASE_DELAY * (2 ** min(attempt, 3))
                delay = max(1.0, backoff + random.uniform(-0.25 * backoff, 0.25 * backoff))
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1500,
        temperature: float = 0.7,
    ) -> str:
        response = await self._call_with_retry(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        usage = getattr(response, "usage", None)
        if usage:
            logger.debug(
                "Completion used %s prompt / %s completion tokens",
                getattr(usage, "prompt_tokens", "?"), getattr(usage, "completion_tokens", "?"),
            )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class DryRunClient:
    """Drop-in replacement for ChatClient that makes zero API calls.

    Echoes the last user message so the agent's keyword dispatch and the
    web front-end can be exercised offline.
    """

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1500,
        temperature: float = 0.7,
    ) -> str:
        prompt = next(
            (m["content"] for m in reversed(messages) if m.get("role") == "user"), "",
        )
        logger.info("[dry-run] completion for %d message(s) with %s", len(messages), model)
        return f"[dry-run] {model} received: {prompt[:200]}"
