from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    match_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    store_db_path: str
    ai_provider: str
    ai_model: str
    openai_api_key: str | None
    openai_base_url: str | None
    gemini_api_key: str | None
    gemini_model: str
    scorer_timeout_s: float
    scorer_max_retries: int
    scorer_initial_retry_delay_s: float
    match_freshness_hours: float
    match_pacing_delay_s: float
    match_error_pacing_delay_s: float


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    match_rate_limit=_get_env("MATCH_RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list("CORS_ALLOWED_ORIGINS", ["*"]),
    store_db_path=_get_env("STORE_DB_PATH", "data/job_board.db") or "data/job_board.db",
    ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
    ai_model=_get_env("AI_MODEL", "gpt-4o-mini") or "gpt-4o-mini",
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_base_url=_get_env("OPENAI_BASE_URL"),
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    gemini_model=_get_env("GEMINI_MODEL", "gemini-1.5-pro") or "gemini-1.5-pro",
    scorer_timeout_s=_get_env_float("SCORER_TIMEOUT_S", 30.0),
    scorer_max_retries=_get_env_int("SCORER_MAX_RETRIES", 3),
    scorer_initial_retry_delay_s=_get_env_float("SCORER_INITIAL_RETRY_DELAY_S", 2.0),
    match_freshness_hours=_get_env_float("MATCH_FRESHNESS_HOURS", 48.0),
    match_pacing_delay_s=_get_env_float("MATCH_PACING_DELAY_S", 1.5),
    match_error_pacing_delay_s=_get_env_float("MATCH_ERROR_PACING_DELAY_S", 1.0),
)

if settings.ai_provider not in {"openai", "gemini"}:
    raise RuntimeError("AI_PROVIDER must be either 'openai' or 'gemini'.")
