from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from app.matching.errors import JobNotFoundError, ResumeLoadError
from app.matching.fallback import fallback_score
from app.matching.pacing import PacingGate
from app.matching.prompt import build_base_prompt, build_match_prompt
from app.matching.scorer_client import ExternalScorerClient
from app.schemas.matching import Job, MatchRecord, MatchScore, Resume
from app.store.base import DataStore, StoreError

logger = logging.getLogger(__name__)

FRESHNESS_HOURS = 48.0
PACING_DELAY_S = 1.5
ERROR_PACING_DELAY_S = 1.0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class MatchOrchestrator:
    """Scores every resume in the store against one job, reusing fresh cached records.

    Resumes are processed strictly one after another. Concurrent runs for the
    same job are not serialized; the last write to a (job, resume) pair wins.
    """

    def __init__(
        self,
        store: DataStore,
        scorer: ExternalScorerClient,
        *,
        fallback: Callable[[Job, Resume], MatchScore] = fallback_score,
        freshness_hours: float = FRESHNESS_HOURS,
        pacing_delay_s: float = PACING_DELAY_S,
        error_pacing_delay_s: float = ERROR_PACING_DELAY_S,
        clock: Callable[[], datetime] = _utc_now,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._store = store
        self._scorer = scorer
        self._fallback = fallback
        self._freshness = timedelta(hours=freshness_hours)
        self._pacing_delay_s = pacing_delay_s
        self._error_pacing_delay_s = error_pacing_delay_s
        self._clock = clock
        self._monotonic = monotonic
        self._sleep = sleep

    def is_fresh(self, record: MatchRecord, now: datetime | None = None) -> bool:
        current = _aware(now or self._clock())
        return current - _aware(record.updated_at) < self._freshness

    def match_job_against_resumes(self, job_id: str) -> list[dict[str, Any]]:
        job = self._load_job(job_id)
        resumes = self._load_resumes()
        if not resumes:
            logger.info("match_run_empty job_id=%s", job.id)
            return []

        existing_by_resume = self._load_existing(job.id)
        base_prompt = build_base_prompt(job)
        gate = PacingGate(clock=self._monotonic, sleep=self._sleep)
        pacing_delay_s, error_pacing_delay_s = self._pacing_delays()

        results: list[dict[str, Any]] = []
        for resume in resumes:
            logger.info("match_resume_start job_id=%s resume_id=%s", job.id, resume.id)
            existing = existing_by_resume.get(resume.id)
            now = _aware(self._clock())
            if existing is not None and self.is_fresh(existing, now):
                age_hours = (now - _aware(existing.updated_at)).total_seconds() / 3600
                logger.info(
                    "match_cache_hit job_id=%s resume_id=%s age_hours=%.1f",
                    job.id,
                    resume.id,
                    age_hours,
                )
                results.append(_result(resume, existing.match_percentage, existing.match_explanation))
                continue

            waited = gate.wait()
            if waited:
                logger.debug("match_paced job_id=%s resume_id=%s waited=%.2fs", job.id, resume.id, waited)
            try:
                score = self._score(job, resume, base_prompt)
            except Exception as exc:  # noqa: BLE001 - one bad resume must not abort the run
                logger.exception("match_resume_failed job_id=%s resume_id=%s", job.id, resume.id)
                message = str(exc) or "Unknown error occurred"
                results.append(_result(resume, 0, f"Error analyzing resume: {message}"))
                gate.release(error_pacing_delay_s)
                continue

            self._persist(job.id, resume.id, existing, score)
            results.append(_result(resume, score.match_percentage, score.explanation))
            gate.release(pacing_delay_s)

        results.sort(key=lambda item: item["matchPercentage"], reverse=True)
        return results

    def _pacing_delays(self) -> tuple[float, float]:
        # Pacing spaces external scorer calls; keyword-only runs have none.
        if not self._scorer.available:
            return 0.0, 0.0
        return self._pacing_delay_s, self._error_pacing_delay_s

    def _load_job(self, job_id: str) -> Job:
        try:
            job = self._store.get_job(job_id)
        except StoreError as exc:
            logger.error("job_fetch_failed job_id=%s: %s", job_id, exc)
            raise JobNotFoundError() from exc
        if job is None:
            logger.error("job_not_found job_id=%s", job_id)
            raise JobNotFoundError()
        return job

    def _load_resumes(self) -> list[Resume]:
        try:
            return list(self._store.list_resumes())
        except StoreError as exc:
            logger.error("resume_fetch_failed: %s", exc)
            raise ResumeLoadError() from exc

    def _load_existing(self, job_id: str) -> dict[str, MatchRecord]:
        try:
            records = self._store.list_matches_for_job(job_id)
        except StoreError as exc:
            # Without the cache every resume is rescored.
            logger.warning("existing_matches_fetch_failed job_id=%s: %s", job_id, exc)
            return {}
        return {record.resume_id: record for record in records}

    def _score(self, job: Job, resume: Resume, base_prompt: str) -> MatchScore:
        prompt = build_match_prompt(base_prompt, resume)
        score = self._scorer.score(prompt, resume.id)
        if score is not None:
            return score
        logger.info("match_fallback job_id=%s resume_id=%s", job.id, resume.id)
        return self._fallback(job, resume)

    def _persist(
        self,
        job_id: str,
        resume_id: str,
        existing: MatchRecord | None,
        score: MatchScore,
    ) -> None:
        updated_at = _aware(self._clock())
        try:
            if existing is not None:
                self._store.update_match(
                    existing.id,
                    match_percentage=score.match_percentage,
                    match_explanation=score.explanation,
                    updated_at=updated_at,
                )
            else:
                self._store.upsert_match(
                    job_id=job_id,
                    resume_id=resume_id,
                    match_percentage=score.match_percentage,
                    match_explanation=score.explanation,
                    updated_at=updated_at,
                )
        except Exception as exc:  # noqa: BLE001 - the score is still returned to the caller
            logger.warning("match_persist_failed job_id=%s resume_id=%s: %s", job_id, resume_id, exc)


def _result(resume: Resume, percentage: int, explanation: str | None) -> dict[str, Any]:
    payload = resume.model_dump(mode="json")
    payload["matchPercentage"] = percentage
    payload["matchExplanation"] = explanation or ""
    return payload
