"""
LLM wrapper: abstracts Groq and Mistral chat completion calls.

Returns structured results. Never raises into business logic;
callers check result["status"] instead.
"""

import logging
import time
from typing import Optional

import httpx

from knowledge_hub.config import config

logger = logging.getLogger(__name__)


def _build_messages(prompt: str, system: Optional[str]) -> list[dict]:
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


def llm_complete(
    prompt: str,
    system: Optional[str] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
) -> dict:
    """Call the configured LLM provider and return a structured result.

    Args:
        prompt: The user message to send.
        system: Optional system instruction sent ahead of the user message.
        model: Override model name (defaults to config).
        temperature: Override temperature (defaults to config).

    Returns:
        Dict with keys:
            text: Response text (empty string on failure)
            latency_ms: Round-trip time in milliseconds
            tokens_in: Input token count (0 if unavailable)
            tokens_out: Output token count (0 if unavailable)
            status: "ok", "no_api_key", "api_error", "timeout", or "import_error"
            error: Error message (empty string on success)
            provider: "groq" or "mistral"
            model: Model name used
    """
    provider = config.ai.provider
    used_model = model or config.ai.model
    used_temp = temperature if temperature is not None else config.ai.temperature

    base = {
        "text": "",
        "latency_ms": 0,
        "tokens_in": 0,
        "tokens_out": 0,
        "status": "ok",
        "error": "",
        "provider": provider,
        "model": used_model,
    }

    api_key = config.ai.api_key
    if not api_key:
        base["status"] = "no_api_key"
        base["error"] = f"No API key configured for provider '{provider}'"
        logger.warning(base["error"])
        return base

    messages = _build_messages(prompt, system)
    if provider == "mistral":
        return _call_mistral(messages, used_model, used_temp, api_key, base)
    return _call_groq(messages, used_model, used_temp, api_key, base)


def _call_groq(
    messages: list[dict], model: str, temperature: float, api_key: str, base: dict
) -> dict:
    """Call Groq API."""
    try:
        from groq import APITimeoutError, Groq
    except ImportError:
        base["status"] = "import_error"
        base["error"] = "groq package not installed"
        logger.error(base["error"])
        return base

    start = time.monotonic()
    try:
        client = Groq(api_key=api_key, timeout=config.ai.timeout, max_retries=0)
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=config.ai.max_tokens,
        )
        elapsed = (time.monotonic() - start) * 1000

        base["text"] = response.choices[0].message.content or ""
        base["latency_ms"] = round(elapsed)
        if response.usage:
            base["tokens_in"] = response.usage.prompt_tokens
            base["tokens_out"] = response.usage.completion_tokens
        return base

    except APITimeoutError as e:
        base["latency_ms"] = round((time.monotonic() - start) * 1000)
        base["status"] = "timeout"
        base["error"] = str(e)
        logger.error("Groq API timeout after %sms", base["latency_ms"])
        return base

    except Exception as e:
        elapsed = (time.monotonic() - start) * 1000
        base["latency_ms"] = round(elapsed)
        base["status"] = "api_error"
        base["error"] = str(e)
        logger.error("Groq API error: %s", e)
        return base


def _call_mistral(
    messages: list[dict], model: str, temperature: float, api_key: str, base: dict
) -> dict:
    """Call Mistral API."""
    try:
        from mistralai import Mistral
    except ImportError:
        base["status"] = "import_error"
        base["error"] = "mistralai package not installed"
        logger.error(base["error"])
        return base

    start = time.monotonic()
    try:
        client = Mistral(api_key=api_key, timeout_ms=int(config.ai.timeout * 1000))
        response = client.chat.complete(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=config.ai.max_tokens,
        )
        elapsed = (time.monotonic() - start) * 1000

        base["text"] = response.choices[0].message.content or ""
        base["latency_ms"] = round(elapsed)
        if response.usage:
            base["tokens_in"] = response.usage.prompt_tokens
            base["tokens_out"] = response.usage.completion_tokens
        return base

    except httpx.TimeoutException as e:
        base["latency_ms"] = round((time.monotonic() - start) * 1000)
        base["status"] = "timeout"
        base["error"] = str(e)
        logger.error("Mistral API timeout after %sms", base["latency_ms"])
        return base

    except Exception as e:
        elapsed = (time.monotonic() - start) * 1000
        base["latency_ms"] = round(elapsed)
        base["status"] = "api_error"
        base["error"] = str(e)
        logger.error("Mistral API error: %s", e)
        return base
