import logging

from app.ai.config import load_ai_config
from app.ai.types import ScorerTransport

from app.ai.providers.openai_provider import OpenAIScorerTransport
from app.ai.providers.gemini_provider import GeminiScorerTransport

logger = logging.getLogger(__name__)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def get_scorer_transport() -> ScorerTransport | None:
    cfg = load_ai_config()

    if not cfg.api_key or _looks_like_placeholder(cfg.api_key):
        logger.warning("scorer_transport_unconfigured provider=%s; keyword fallback only", cfg.provider)
        return None

    if cfg.provider == "openai":
        return OpenAIScorerTransport(model=cfg.model, api_key=cfg.api_key, timeout_s=cfg.timeout_s)

    if cfg.provider == "gemini":
        return GeminiScorerTransport(model=cfg.model, api_key=cfg.api_key, timeout_s=cfg.timeout_s)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
