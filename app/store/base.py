from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from app.schemas.matching import Job, MatchRecord, Resume


class StoreError(RuntimeError):
    pass


class DataStore(Protocol):
    """Relational store holding jobs, resumes and cached match records."""

    def get_job(self, job_id: str) -> Job | None: ...

    def list_resumes(self) -> list[Resume]: ...

    def list_matches_for_job(self, job_id: str) -> list[MatchRecord]: ...

    def list_matches_for_resume(self, resume_id: str) -> list[MatchRecord]: ...

    def get_match(self, job_id: str, resume_id: str) -> MatchRecord | None: ...

    def insert_match(
        self,
        *,
        job_id: str,
        resume_id: str,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> MatchRecord: ...

    def update_match(
        self,
        match_id: str,
        *,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> None: ...

    def upsert_match(
        self,
        *,
        job_id: str,
        resume_id: str,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> MatchRecord: ...

    def add_job(self, job: dict[str, Any]) -> Job: ...

    def add_resume(self, resume: dict[str, Any]) -> Resume: ...

    def delete_matches_for_job(self, job_id: str) -> int: ...
