from __future__ import annotations

import logging

import httpx

from app.ai.types import ScorerError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1/models"


class GeminiScorerTransport:
    name = "gemini"

    def __init__(
        self,
        model: str,
        api_key: str,
        timeout_s: float = 30.0,
        base_url: str = GEMINI_BASE_URL,
        client: httpx.Client | None = None,
    ):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is missing")
        self._url = f"{base_url.rstrip('/')}/{model}:generateContent"
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout_s)

    def complete(self, prompt: str) -> str:
        try:
            response = self._client.post(
                self._url,
                headers={"Content-Type": "application/json", "x-goog-api-key": self._api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
            )
        except httpx.HTTPError as exc:
            raise ScorerError(f"Gemini request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "gemini_api_error status=%s body=%s",
                response.status_code,
                response.text[:500],
            )
            raise ScorerError(f"Error from Gemini API: {response.status_code}", http_status=response.status_code)

        try:
            payload = response.json()
            return payload["candidates"][0]["content"]["parts"][0]["text"] or "{}"
        except (ValueError, KeyError, IndexError, TypeError):
            return "{}"
