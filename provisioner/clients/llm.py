"""Generic LLM client with provider-agnostic interface."""

import logging
from typing import Callable

from anthropic import Anthropic
from google import genai
from openai import OpenAI

from ..config import (
    ANTHROPIC_API_KEY,
    ANTHROPIC_MAX_TOKENS,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_MODEL,
    GEMINI_API_KEY,
    OPENAI_API_KEY,
)

logger = logging.getLogger(__name__)

PROVIDERS = ("openai", "anthropic", "gemini")


class UnsupportedProviderError(ValueError):
    """Provider name is not one of PROVIDERS."""
    pass


class LLMClient:
    """Single-shot text completion across OpenAI, Anthropic and Gemini."""

    def __init__(self):
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    def complete(
        self,
        provider: str,
        model: str,
        prompt: str,
        context_id: str = "",
        api_key: str = "",
    ) -> str:
        """Make one completion call and return the response text.

        Args:
            provider: "OpenAI", "Anthropic" or "Gemini" (case-insensitive).
            model: Provider model name; empty uses the configured default.
            prompt: Full user prompt.
            context_id: Caller reference (project id) for logging.
            api_key: Provider key; empty falls back to the environment.

        Returns:
            Response text content.
        """
        name = (provider or "").strip().lower()
        if name == "openai":
            text, usage = self._call_openai(model or DEFAULT_OPENAI_MODEL, prompt, api_key or OPENAI_API_KEY)
        elif name == "anthropic":
            text, usage = self._call_anthropic(
                model or DEFAULT_ANTHROPIC_MODEL, prompt, api_key or ANTHROPIC_API_KEY
            )
        elif name == "gemini":
            text, usage = self._call_gemini(model or DEFAULT_GEMINI_MODEL, prompt, api_key or GEMINI_API_KEY)
        else:
            raise UnsupportedProviderError(f"Provider {provider!r} not implemented")

        input_tokens, output_tokens = usage
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
        logger.info(
            "%s/%s [%s]: input=%d, output=%d",
            name, model, context_id or "-", input_tokens, output_tokens,
        )
        return (text or "").strip()

    def bind(self, provider: str, model: str, context_id: str = "", api_key: str = "") -> Callable[[str], str]:
        """Fix everything but the prompt; the result is a ``model_call``."""
        def call(prompt: str) -> str:
            return self.complete(provider, model, prompt, context_id=context_id, api_key=api_key)
        return call

    def get_token_totals(self) -> tuple[int, int]:
        """Return accumulated (input, output) tokens."""
        return self.total_input_tokens, self.total_output_tokens

    def _call_openai(self, model: str, prompt: str, api_key: str | None) -> tuple[str, tuple[int, int]]:
        client = OpenAI(api_key=api_key)
        completion = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
        )
        usage = completion.usage
        tokens = (usage.prompt_tokens, usage.completion_tokens) if usage else (0, 0)
        return completion.choices[0].message.content, tokens

    def _call_anthropic(self, model: str, prompt: str, api_key: str | None) -> tuple[str, tuple[int, int]]:
        client = Anthropic(api_key=api_key)
        message = client.messages.create(
            model=model,
            max_tokens=ANTHROPIC_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
        usage = message.usage
        tokens = (usage.input_tokens, usage.output_tokens) if usage else (0, 0)
        return text, tokens

    def _call_gemini(self, model: str, prompt: str, api_key: str | None) -> tuple[str, tuple[int, int]]:
        client = genai.Client(api_key=api_key)
        response = client.models.generate_content(model=model, contents=prompt)
        meta = response.usage_metadata
        tokens = (
            (meta.prompt_token_count or 0, meta.candidates_token_count or 0) if meta else (0, 0)
        )
        return response.text, tokens
