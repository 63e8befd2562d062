from __future__ import annotations

import json
import logging
import math
import re
import time
from typing import Any, Callable

from app.ai.types import ScorerError, ScorerTransport
from app.schemas.matching import MatchScore

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_RETRY_DELAY_S = 2.0

PARSE_FAILED_EXPLANATION = "Failed to parse response"
NO_EXPLANATION = "No explanation provided"

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Best-effort extraction of the brace-delimited JSON object in a model reply."""
    if not text:
        return None
    found = _JSON_OBJECT_RE.search(text)
    if not found:
        return None
    try:
        parsed = json.loads(found.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _coerce_percentage(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(math.floor(number + 0.5), 100))


def parse_match_reply(text: str | None) -> MatchScore:
    parsed = extract_json_object(text)
    if parsed is None:
        logger.warning("scorer_reply_unparseable reply_len=%s", len(text or ""))
        return MatchScore(match_percentage=0, explanation=PARSE_FAILED_EXPLANATION)
    explanation = parsed.get("explanation")
    return MatchScore(
        match_percentage=_coerce_percentage(parsed.get("matchPercentage")),
        explanation=str(explanation).strip() if explanation else NO_EXPLANATION,
    )


def _is_rate_limited(exc: Exception) -> bool:
    if isinstance(exc, ScorerError):
        return exc.is_rate_limited
    return "rate limit" in str(exc).lower()


class ExternalScorerClient:
    """Calls the AI scorer and retries only rate-limited attempts with exponential backoff."""

    def __init__(
        self,
        transport: ScorerTransport | None,
        *,
        max_retries: int = MAX_RETRIES,
        initial_retry_delay_s: float = INITIAL_RETRY_DELAY_S,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._transport = transport
        self._max_retries = max(0, int(max_retries))
        self._initial_retry_delay_s = initial_retry_delay_s
        self._sleep = sleep

    @property
    def available(self) -> bool:
        return self._transport is not None

    def score(self, prompt: str, resume_id: str) -> MatchScore | None:
        """Return the parsed score, or None when the scorer could not produce one."""
        if self._transport is None:
            return None

        retries = 0
        retry_delay = self._initial_retry_delay_s
        while True:
            logger.info(
                "scorer_attempt provider=%s resume_id=%s attempt=%s/%s",
                self._transport.name,
                resume_id,
                retries + 1,
                self._max_retries + 1,
            )
            try:
                reply = self._transport.complete(prompt)
            except Exception as exc:  # noqa: BLE001 - every failure degrades to the fallback scorer
                if _is_rate_limited(exc) and retries < self._max_retries:
                    logger.warning(
                        "scorer_rate_limited resume_id=%s retry_in=%.1fs: %s",
                        resume_id,
                        retry_delay,
                        exc,
                    )
                    self._sleep(retry_delay)
                    retries += 1
                    retry_delay *= 2
                    continue
                logger.error(
                    "scorer_failed resume_id=%s attempts=%s: %s",
                    resume_id,
                    retries + 1,
                    exc,
                )
                return None
            return parse_match_reply(reply)
