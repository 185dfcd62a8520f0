"""Chat-completion clients for the LLM providers.

Messages use the OpenAI-style ``{"role": ..., "content": ...}`` shape
throughout the service; each client converts to its provider's format.
No retries: a failed call surfaces as ``UpstreamError`` and the caller
decides what to do.
"""
import asyncio
import logging
from typing import Optional

import requests
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from mockinterview.config import Settings
from mockinterview.errors import ConfigurationError, EmptyUpstreamResponse, UpstreamError

logger = logging.getLogger(__name__)


class LLMClient:
    """Base class; subclasses implement ``complete``."""

    provider_name = "LLM"

    def complete(
        self,
        messages: list[dict],
        temperature: float = 0.4,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        raise NotImplementedError

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float = 0.4,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """Async wrapper for ``complete`` to avoid blocking the event loop."""
        return await asyncio.to_thread(self.complete, messages, temperature, max_tokens, json_mode)


class OpenRouterClient(LLMClient):
    provider_name = "OpenRouter"

    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 60):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    def complete(self, messages, temperature=0.4, max_tokens=None, json_mode=False):
        body = {"model": self.model, "messages": messages, "temperature": temperature}
        if max_tokens:
            body["max_tokens"] = max_tokens
        if json_mode:
            # Passed through for compatible models
            body["response_format"] = {"type": "json_object"}

        try:
            res = requests.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("[OpenRouter] request error: %s", e)
            raise UpstreamError("OpenRouter request failed", status=None, body=str(e)) from e

        if not res.ok:
            logger.warning("[OpenRouter] %s %s", res.status_code, res.text[:200])
            raise UpstreamError("OpenRouter request failed", status=res.status_code, body=res.text)

        try:
            data = res.json()
        except ValueError as e:
            raise EmptyUpstreamResponse("No content from OpenRouter", raw=res.text) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            raise EmptyUpstreamResponse("No content from OpenRouter", raw=data)
        return content.strip()


class GeminiClient(LLMClient):
    provider_name = "Gemini"

    def __init__(self, api_key: str, model: str):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    def complete(self, messages, temperature=0.4, max_tokens=None, json_mode=False):
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        contents = [
            types.Content(
                role="model" if m["role"] == "assistant" else "user",
                parts=[types.Part(text=m["content"])],
            )
            for m in messages
            if m["role"] != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction="\n\n".join(system_parts) or None,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            logger.warning("[Gemini] %s %s", e.code, str(e.message)[:200])
            raise UpstreamError("Gemini request failed", status=e.code, body=str(e.message or e)) from e

        text = response.text
        if not text or not text.strip():
            raise EmptyUpstreamResponse("No content from Gemini", raw=None)
        return text.strip()


def build_llm_client(settings: Settings) -> LLMClient:
    """Create the configured provider's client, or fail before any call is made."""
    if settings.llm_provider == "gemini":
        if not settings.gemini_api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY on server")
        return GeminiClient(settings.gemini_api_key, settings.gemini_model)

    if settings.llm_provider != "openrouter":
        raise ConfigurationError(f"Unknown LLM_PROVIDER: {settings.llm_provider}")
    if not settings.openrouter_api_key:
        raise ConfigurationError("Missing OPENROUTER_API_KEY on server")
    return OpenRouterClient(
        settings.openrouter_api_key,
        settings.openrouter_model,
        settings.openrouter_base_url,
        timeout=settings.upstream_timeout_seconds,
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence (```lang ... ```) if present."""
    trimmed = text.strip()
    if not trimmed.startswith("```"):
        return trimmed
    first_newline = trimmed.find("\n")
    if first_newline < 0:
        return trimmed.strip("`").strip()
    opener = trimmed[3:first_newline].strip()
    body = trimmed[first_newline + 1:] if opener.isalnum() or not opener else trimmed[3:]
    if body.rstrip().endswith("```"):
        body = body.rstrip()[:-3]
    return body.strip()
