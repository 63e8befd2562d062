from app.ai.factory import get_scorer_transport
from app.core.config import settings
from app.store import get_data_store

from .errors import JobNotFoundError, MatchError, ResumeLoadError
from .fallback import fallback_score
from .orchestrator import MatchOrchestrator
from .scorer_client import ExternalScorerClient


def build_match_orchestrator() -> MatchOrchestrator:
    scorer = ExternalScorerClient(
        get_scorer_transport(),
        max_retries=settings.scorer_max_retries,
        initial_retry_delay_s=settings.scorer_initial_retry_delay_s,
    )
    return MatchOrchestrator(
        get_data_store(),
        scorer,
        freshness_hours=settings.match_freshness_hours,
        pacing_delay_s=settings.match_pacing_delay_s,
        error_pacing_delay_s=settings.match_error_pacing_delay_s,
    )


__all__ = [
    "ExternalScorerClient",
    "JobNotFoundError",
    "MatchError",
    "MatchOrchestrator",
    "ResumeLoadError",
    "build_match_orchestrator",
    "fallback_score",
]
