"""
llm.py
------
Text-Generation Client: one prompt in, one completion out.

GeminiClient wraps the google-genai SDK with decoding parameters fixed at process
start (config.GEMINI_*). StubLLMClient never calls the network and always reports
failure, which routes every generation through the local fallback generator.

Neither client raises: transport / API / content failures come back as
CompletionResult(success=False, error=...). There are no retries at this layer.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from google import genai as genai_sdk
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from wahotrip import config

logger = logging.getLogger(__name__)

# Finish reasons that mean the text was withheld or cut by the provider
_BLOCKED_FINISH_REASONS = {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT"}


@dataclass
class CompletionResult:
    success: bool
    content: str = ""
    error: str = ""
    finish_reason: str = ""
    response_time_ms: int = 0


def estimate_tokens(text: str) -> int:
    """Rough token estimate used for prompt budgeting: one token per four characters."""
    return -(-len(text) // 4)


class LLMClient(Protocol):
    def complete(self, prompt: str) -> CompletionResult: ...


# ── Stub LLM client (no API calls) ───────────────────────────────────────────
class StubLLMClient:
    """No-op client used when USE_STUB_LLM=true or no API key is configured."""

    def complete(self, prompt: str) -> CompletionResult:  # noqa: ARG002
        return CompletionResult(success=False, error="LLM disabled (stub client)")


# ── Gemini LLM client ────────────────────────────────────────────────────────
class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        sdk_client: Optional[genai_sdk.Client] = None,
    ):
        self._model = model or config.GEMINI_MODEL
        self._client = sdk_client or genai_sdk.Client(
            api_key=api_key or config.GEMINI_API_KEY,
            http_options={
                "base_url": config.GEMINI_BASE_URL,
                "api_version": config.GEMINI_API_VERSION,
                "timeout": config.GEMINI_TIMEOUT_SECONDS * 1000,   # milliseconds
            },
        )
        self._generation_config = genai_types.GenerateContentConfig(
            temperature=config.GEMINI_TEMPERATURE,
            top_p=config.GEMINI_TOP_P,
            top_k=config.GEMINI_TOP_K,
            max_output_tokens=config.GEMINI_MAX_OUTPUT_TOKENS,
            candidate_count=1,
        )

    def complete(self, prompt: str) -> CompletionResult:
        if not prompt or not prompt.strip():
            return CompletionResult(success=False, error="Empty or invalid prompt provided")
        estimated = estimate_tokens(prompt)
        if estimated > config.GEMINI_MAX_INPUT_TOKENS:
            return CompletionResult(
                success=False,
                error=f"Prompt too large: ~{estimated} tokens (limit {config.GEMINI_MAX_INPUT_TOKENS})",
            )

        started = time.monotonic()
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=prompt,
                config=self._generation_config,
            )
        except genai_errors.APIError as exc:
            logger.warning("Gemini API error %s: %s", exc.code, exc.message)
            return CompletionResult(
                success=False,
                error=f"API error {exc.code}: {exc.message}",
                response_time_ms=_elapsed_ms(started),
            )
        except Exception as exc:   # network / timeout / SDK-side failures
            logger.warning("Gemini request failed: %s", exc)
            return CompletionResult(
                success=False,
                error=f"Request failed: {exc}",
                response_time_ms=_elapsed_ms(started),
            )

        elapsed = _elapsed_ms(started)
        candidates = response.candidates or []
        if not candidates:
            return CompletionResult(success=False, error="No candidates in response",
                                    response_time_ms=elapsed)

        finish_reason = _finish_reason_name(candidates[0].finish_reason)
        if finish_reason in _BLOCKED_FINISH_REASONS:
            return CompletionResult(
                success=False,
                error=f"Response blocked: {finish_reason}",
                finish_reason=finish_reason,
                response_time_ms=elapsed,
            )

        text = _candidate_text(candidates[0])
        if not text.strip():
            return CompletionResult(success=False, error="Empty completion",
                                    finish_reason=finish_reason, response_time_ms=elapsed)

        if finish_reason == "MAX_TOKENS":
            # truncated output is still handed to the repair chain
            logger.info("Gemini completion hit the output token ceiling (%d chars)", len(text))

        return CompletionResult(
            success=True,
            content=text,
            finish_reason=finish_reason,
            response_time_ms=elapsed,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _finish_reason_name(reason) -> str:
    if reason is None:
        return ""
    return getattr(reason, "name", None) or str(reason)


def _candidate_text(candidate) -> str:
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        text = getattr(part, "text", None)
        if text:
            return text
    return ""


def make_llm_client() -> LLMClient:
    """Pick the client from config: stub when disabled or unconfigured, else Gemini."""
    if config.USE_STUB_LLM or not config.GEMINI_API_KEY:
        logger.info("Using stub LLM client; generation will use the local fallback")
        return StubLLMClient()
    return GeminiClient()
