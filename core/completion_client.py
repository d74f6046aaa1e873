"""
One-shot, non-streaming chat completion against an OpenAI-compatible
endpoint (SiliconFlow by default) or Groq.
Every failure surfaces as CompletionError so callers handle one type.
"""
import logging
from typing import List, Optional

import requests
from groq import APIError, Groq

from core.config import AIConfig
from core.errors import CompletionError

log = logging.getLogger(__name__)


def _is_rate_limit_error(e) -> bool:
    msg = str(e).lower()
    return "429" in msg or "rate limit" in msg or "rate_limit_exceeded" in msg


def _extract_content(data) -> str:
    if not isinstance(data, dict):
        raise CompletionError("API response is not a JSON object")
    if data.get("error"):
        error = data["error"]
        message = error.get("message", error) if isinstance(error, dict) else error
        raise CompletionError(f"API error: {message}", rate_limited=_is_rate_limit_error(message))
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not content:
        raise CompletionError("API returned empty content")
    if not isinstance(content, str):
        raise CompletionError(f"API content is a {type(content).__name__}, not text")
    return content


def _post_openai_compatible(body: dict, config: AIConfig, timeout: float) -> str:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }
    try:
        response = requests.post(config.endpoint, json=body, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise CompletionError(f"Request timed out after {timeout:.0f}s") from e
    except requests.RequestException as e:
        raise CompletionError(f"Network request failed: {e}") from e

    if response.status_code != 200:
        raise CompletionError(
            f"API request failed ({response.status_code}): {response.text[:500]}",
            rate_limited=response.status_code == 429,
        )
    try:
        data = response.json()
    except ValueError as e:
        raise CompletionError("API response is not valid JSON") from e
    return _extract_content(data)


def _create_groq(body: dict, config: AIConfig, timeout: float) -> str:
    client = Groq(api_key=config.api_key, timeout=timeout)
    try:
        response = client.chat.completions.create(**body)
    except APIError as e:
        raise CompletionError(f"Groq request failed: {e}", rate_limited=_is_rate_limit_error(e)) from e
    return _extract_content(response.model_dump())


def chat_completion(
    messages: List[dict],
    config: AIConfig,
    temperature: float = 0.1,
    max_tokens: int = 4000,
    timeout: Optional[float] = None,
) -> str:
    """
    Send messages and return the assistant message text.
    Raises CompletionError on any transport or response failure.
    """
    config.require_api_key()
    timeout = timeout if timeout is not None else config.request_timeout
    body = {
        "model": config.model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "stream": False,
    }

    if config.provider == "groq":
        content = _create_groq(body, config, timeout)
    else:
        content = _post_openai_compatible(body, config, timeout)

    log.debug("Completion from %s returned %d chars", config.model, len(content))
    return content.strip()
