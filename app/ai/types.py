from typing import Protocol


class ScorerError(RuntimeError):
    """Raised by a scorer transport when the provider did not answer successfully."""

    def __init__(self, message: str, *, http_status: int | None = None):
        super().__init__(message)
        self.http_status = http_status

    @property
    def is_rate_limited(self) -> bool:
        return self.http_status == 429 or "rate limit" in str(self).lower()


class ScorerTransport(Protocol):
    name: str

    def complete(self, prompt: str) -> str: ...
