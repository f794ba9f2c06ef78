"""Relay prompts to third-party LLM providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import httpx

from chat_relay.config import Settings
from chat_relay.exceptions import ProviderError

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 1024
TEMPERATURE = 0.7

Request = tuple[str, dict[str, str], dict[str, Any]]


@dataclass(frozen=True)
class Provider:
    """One LLM provider: where to send a prompt and how to read the reply."""

    name: str
    label: str
    endpoint: str
    model: str
    settings_key: str
    build_request: Callable[["Provider", str, str], Request] = field(repr=False)
    extract_text: Callable[[Any], str] = field(repr=False)

    def request_for(self, message: str, api_key: str) -> Request:
        return self.build_request(self, message, api_key)


def _anthropic_request(provider: Provider, message: str, api_key: str) -> Request:
    headers = {
        "x-api-key": api_key,
        "anthropic-version": "2023-06-01",
        "Content-Type": "application/json",
    }
    payload = {
        "model": provider.model,
        "max_tokens": MAX_OUTPUT_TOKENS,
        "messages": [{"role": "user", "content": message}],
    }
    return provider.endpoint, headers, payload


def _anthropic_text(data: Any) -> str:
    blocks = data["content"]
    return "".join(block["text"] for block in blocks if block.get("type") == "text")


def _chat_completions_request(provider: Provider, message: str, api_key: str) -> Request:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": provider.model,
        "messages": [{"role": "user", "content": message}],
        "max_tokens": MAX_OUTPUT_TOKENS,
        "temperature": TEMPERATURE,
    }
    return provider.endpoint, headers, payload


def _chat_completions_text(data: Any) -> str:
    return data["choices"][0]["message"]["content"]


def _gemini_request(provider: Provider, message: str, api_key: str) -> Request:
    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }
    payload = {
        "contents": [{"role": "user", "parts": [{"text": message}]}],
        "generationConfig": {
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "temperature": TEMPERATURE,
        },
    }
    return provider.endpoint, headers, payload


def _gemini_text(data: Any) -> str:
    parts = data["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


PROVIDERS: dict[str, Provider] = {
    provider.name: provider
    for provider in (
        Provider(
            name="claude",
            label="Claude",
            endpoint="https://api.anthropic.com/v1/messages",
            model="claude-3-5-sonnet-20241022",
            settings_key="anthropic_api_key",
            build_request=_anthropic_request,
            extract_text=_anthropic_text,
        ),
        Provider(
            name="gpt",
            label="OpenAI",
            endpoint="https://api.openai.com/v1/chat/completions",
            model="gpt-4o-mini",
            settings_key="openai_api_key",
            build_request=_chat_completions_request,
            extract_text=_chat_completions_text,
        ),
        Provider(
            name="gemini",
            label="Gemini",
            endpoint=(
                "https://generativelanguage.googleapis.com/v1beta/models/"
                "gemini-1.5-flash:generateContent"
            ),
            model="gemini-1.5-flash",
            settings_key="google_api_key",
            build_request=_gemini_request,
            extract_text=_gemini_text,
        ),
        Provider(
            name="deepseek",
            label="DeepSeek",
            endpoint="https://api.deepseek.com/chat/completions",
            model="deepseek-chat",
            settings_key="deepseek_api_key",
            build_request=_chat_completions_request,
            extract_text=_chat_completions_text,
        ),
    )
}


def unknown_model_text(model: Any) -> str:
    return f"Unknown model: {model}. Supported models: {', '.join(PROVIDERS)}"


def not_configured_text(provider: Provider) -> str:
    return f"{provider.label} API key not configured"


class RelayService:
    """Dispatch a prompt to the selected provider.

    Every provider-side failure (missing credential, HTTP error status,
    transport fault, unreadable payload) comes back as the reply text, so
    callers always receive a string and never an exception.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        providers: Mapping[str, Provider] = PROVIDERS,
    ) -> None:
        self._client = client
        self._settings = settings
        self._providers = providers

    async def ask(self, model: Any, message: str, api_keys: Mapping[str, str] | None = None) -> str:
        provider = self._providers.get(model) if isinstance(model, str) else None
        if provider is None:
            return unknown_model_text(model)

        api_key = self.resolve_key(provider, api_keys or {})
        if not api_key:
            return not_configured_text(provider)

        try:
            return await self._complete(provider, message, api_key)
        except ProviderError as exc:
            return exc.message

    def resolve_key(self, provider: Provider, api_keys: Mapping[str, str]) -> str | None:
        """Request-supplied credentials win over the server-wide setting."""

        return api_keys.get(provider.name) or getattr(self._settings, provider.settings_key)

    async def _complete(self, provider: Provider, message: str, api_key: str) -> str:
        url, headers, payload = provider.request_for(message, api_key)

        try:
            response = await self._client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.warning(
                "Provider request failed",
                extra={"provider": provider.name},
                exc_info=exc,
            )
            raise ProviderError(f"{provider.label} request failed: {exc}") from exc

        if response.is_error:
            logger.error(
                "Provider returned an error",
                extra={
                    "provider": provider.name,
                    "status_code": response.status_code,
                    "response_text": response.text,
                },
            )
            raise ProviderError(
                f"{provider.label} API error ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            text = provider.extract_text(response.json())
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.error("Malformed provider response", extra={"provider": provider.name})
            raise ProviderError(f"{provider.label} returned an unexpected response") from exc

        if not isinstance(text, str) or not text:
            raise ProviderError(f"{provider.label} returned an unexpected response")

        return text
