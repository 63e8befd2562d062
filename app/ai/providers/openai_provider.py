from __future__ import annotations

import os
from typing import Optional

from openai import APIConnectionError, APIStatusError, OpenAI, RateLimitError

from app.ai.types import ScorerError


class OpenAIScorerTransport:
    name = "openai"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        temperature: float = 0.2,
        client: OpenAI | None = None,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if client is None and not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # Backoff is owned by the scorer client, so SDK retries stay off.
        self._client = client or OpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=0,
        )

    def complete(self, prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
            )
        except RateLimitError as exc:
            raise ScorerError(f"OpenAI rate limit: {exc}", http_status=429) from exc
        except APIStatusError as exc:
            raise ScorerError(f"Error from OpenAI API: {exc.status_code}", http_status=exc.status_code) from exc
        except APIConnectionError as exc:
            raise ScorerError(f"OpenAI connection failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        return content or "{}"
