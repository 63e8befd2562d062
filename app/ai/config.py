from dataclasses import dataclass

from app.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    timeout_s: float


def load_ai_config() -> AIConfig:
    provider = settings.ai_provider
    if provider == "gemini":
        return AIConfig(
            provider=provider,
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            timeout_s=settings.scorer_timeout_s,
        )
    return AIConfig(
        provider=provider,
        model=settings.ai_model,
        api_key=settings.openai_api_key,
        timeout_s=settings.scorer_timeout_s,
    )
