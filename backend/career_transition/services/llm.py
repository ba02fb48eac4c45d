import json
import logging
import re
from typing import Any, Iterable

import httpx

from career_transition.core.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_LLM_PROVIDERS = {"anthropic", "openai", "groq"}
DEFAULT_MAX_TOKENS = 4096
FENCED_JSON_PATTERN = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


class LLMError(RuntimeError):
    """The generation service failed or returned no usable text."""


class LLMResponseParseError(LLMError):
    """Generated text did not contain a JSON object."""


def _normalize_provider() -> str:
    provider = (settings.llm_provider or "anthropic").strip().lower()
    if provider not in SUPPORTED_LLM_PROVIDERS:
        return "anthropic"
    return provider


def _provider_config() -> tuple[str, str | None, str, str]:
    provider = _normalize_provider()
    if provider == "openai":
        return (
            provider,
            settings.openai_api_key,
            settings.openai_model,
            settings.openai_api_base.rstrip("/"),
        )
    if provider == "groq":
        return (
            provider,
            settings.groq_api_key,
            settings.groq_model,
            settings.groq_api_base.rstrip("/"),
        )
    return (
        "anthropic",
        settings.anthropic_api_key,
        settings.anthropic_model,
        settings.anthropic_api_base.rstrip("/"),
    )


def ai_is_configured() -> bool:
    _, api_key, model, _ = _provider_config()
    return bool(settings.ai_enabled and api_key and model)


def get_active_ai_provider() -> str:
    return _provider_config()[0]


def get_active_ai_model() -> str:
    return _provider_config()[2]


def _turns(messages: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    return [{"role": str(msg["role"]), "content": str(msg["content"])} for msg in messages]


def _anthropic_request(
    api_key: str,
    model: str,
    api_base: str,
    system_prompt: str,
    messages: list[dict[str, str]],
    max_tokens: int,
) -> tuple[str, dict, dict]:
    headers = {
        "x-api-key": api_key,
        "anthropic-version": settings.anthropic_version,
        "content-type": "application/json",
    }
    body = {
        "model": model,
        "max_tokens": max_tokens,
        "system": system_prompt,
        "messages": messages,
    }
    return f"{api_base}/messages", headers, body


def _chat_completions_request(
    api_key: str,
    model: str,
    api_base: str,
    system_prompt: str,
    messages: list[dict[str, str]],
    max_tokens: int,
) -> tuple[str, dict, dict]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    body = {
        "model": model,
        "max_tokens": max_tokens,
        "messages": [{"role": "system", "content": system_prompt}, *messages],
    }
    return f"{api_base}/chat/completions", headers, body


def first_text_block(provider: str, data: dict[str, Any]) -> str | None:
    if provider == "anthropic":
        for block in data.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text", "")
        return None
    choices = data.get("choices") or []
    if not choices:
        return None
    content = (choices[0].get("message") or {}).get("content")
    return content if isinstance(content, str) else None


def send_message(
    system_prompt: str,
    messages: Iterable[dict[str, Any]],
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> str:
    """Send one conversation to the configured provider and return its text.

    There is no retry: transport and HTTP errors surface as ``LLMError``.
    """
    provider, api_key, model, api_base = _provider_config()
    if not settings.ai_enabled:
        raise LLMError("AI is disabled")
    if not api_key:
        raise LLMError(f"{provider} API key is not configured")
    if not model:
        raise LLMError(f"No model configured for provider '{provider}'")

    turns = _turns(messages)
    build = _anthropic_request if provider == "anthropic" else _chat_completions_request
    url, headers, body = build(api_key, model, api_base, system_prompt, turns, max_tokens)

    logger.debug(
        "Sending %d message(s) to %s (system prompt %d chars)",
        len(turns),
        provider,
        len(system_prompt),
    )
    try:
        with httpx.Client(timeout=settings.llm_timeout_seconds) as client:
            response = client.post(url, headers=headers, json=body)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.error("LLM API error (%s) from %s: %s", status, provider, exc.response.text[:500])
        raise LLMError(f"AI service request failed ({status})") from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("LLM call to %s failed: %s", provider, exc)
        raise LLMError("AI service request failed") from exc

    text = first_text_block(provider, data)
    if text is None:
        raise LLMError("No text content in LLM response")
    logger.debug("Received %d chars from %s", len(text), provider)
    return text


def _json_candidates(text: str) -> list[str]:
    candidates = [text.strip()]
    fenced = FENCED_JSON_PATTERN.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start = text.find("{")
    end = text.rfind("}") + 1
    if start >= 0 and end > start:
        candidates.append(text[start:end])
    return candidates


def extract_json_object(text: str | None) -> dict[str, Any]:
    """Pull a JSON object out of free-form generated text.

    Candidates, in order: the whole reply, a fenced json block, and the span
    from the first ``{`` to the last ``}``. A candidate only counts if it
    decodes to a JSON object.
    """
    if not text or not text.strip():
        raise LLMResponseParseError("Empty response")
    for candidate in _json_candidates(text):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise LLMResponseParseError("No JSON object found in response")
