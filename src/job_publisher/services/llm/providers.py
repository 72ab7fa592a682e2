"""
Completion providers for OpenRouter and Google Gemini.

Both expose ``complete(model, prompt, json_mode=False) -> str`` and translate
quota and unknown-model responses into the errors the content generator
skips on. Calls are blocking; async callers wrap them in ``asyncio.to_thread``.
"""
from typing import Any, Dict, Optional

import requests
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ...config import Settings
from ...errors import ConfigurationError, ModelNotFoundError, ProviderError, QuotaExceededError
from ...logging_config import setup_logging

logger = setup_logging(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
PLACEHOLDER_KEYS = {"your_openrouter_api_key", "your_gemini_api_key", "replace_me"}


def clean_key(value: Optional[str]) -> str:
    key = (value or "").strip()
    if not key or key.lower() in PLACEHOLDER_KEYS:
        return ""
    return key


def classify_status(status_code: Optional[int], message: str) -> ProviderError:
    """Map a provider failure onto the matching error type."""
    lowered = message.lower()
    if status_code == 429 or "quota" in lowered or "rate limit" in lowered:
        return QuotaExceededError(message, status_code)
    if status_code == 404:
        return ModelNotFoundError(message, status_code)
    return ProviderError(message, status_code)


class OpenRouterProvider:
    """Chat completions through the OpenRouter HTTP API."""

    name = "openrouter"

    def __init__(
        self,
        api_key: str,
        referer: str = "http://localhost:3000",
        title: str = "Blogger Publisher Bot",
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = clean_key(api_key)
        self.referer = referer
        self.title = title
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is missing or not configured in .env")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    def complete(self, model: str, prompt: str, json_mode: bool = False) -> str:
        headers = self._headers()
        payload: Dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        logger.info("Requesting completion from OpenRouter", extra={"model": model, "json_mode": json_mode})
        response = self.session.post(OPENROUTER_URL, headers=headers, json=payload, timeout=self.timeout)

        try:
            data = response.json()
        except ValueError:
            data = {}

        error = data.get("error") if isinstance(data, dict) else None
        if not response.ok or error:
            message = (error or {}).get("message") if isinstance(error, dict) else None
            status_code = response.status_code if not response.ok else (error or {}).get("code")
            raise classify_status(
                status_code if isinstance(status_code, int) else None,
                f"OpenRouter Error: {message or response.reason}",
            )

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"OpenRouter Error: unexpected response shape ({e})") from e


class GeminiProvider:
    """Text generation through the google-genai SDK."""

    name = "gemini"

    def __init__(self, api_key: str, client: Optional[Any] = None):
        self.api_key = clean_key(api_key)
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY is missing or not configured in .env")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def complete(self, model: str, prompt: str, json_mode: bool = False) -> str:
        config = genai_types.GenerateContentConfig(response_mime_type="application/json") if json_mode else None
        logger.info("Requesting completion from Gemini", extra={"model": model, "json_mode": json_mode})
        try:
            response = self.client.models.generate_content(model=model, contents=prompt, config=config)
        except genai_errors.APIError as e:
            raise classify_status(e.code, f"Gemini Error: {e.message or e}") from e
        return response.text or ""


def build_providers(settings: Settings) -> Dict[str, Any]:
    """Provider registry keyed by the prefix used in model candidates."""
    return {
        OpenRouterProvider.name: OpenRouterProvider(
            settings.openrouter_api_key,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
            timeout=settings.openrouter_timeout_seconds,
        ),
        GeminiProvider.name: GeminiProvider(settings.gemini_api_key),
    }
