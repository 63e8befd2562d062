from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.ai.types import ScorerError


class FakeClock:
    """Wall clock and monotonic clock that only move when something sleeps."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.current.timestamp()

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)


class ScriptedTransport:
    """Scorer transport replaying scripted replies; the last outcome repeats."""

    name = "scripted"

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def calls(self) -> int:
        return len(self.prompts)


def rate_limited() -> ScorerError:
    return ScorerError("Error from Gemini API: 429", http_status=429)
