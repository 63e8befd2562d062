from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, TypeVar

from pydantic import BaseModel, ValidationError

from app.schemas.matching import Job, MatchRecord, Resume
from app.store.base import StoreError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL DEFAULT '',
        company TEXT NOT NULL DEFAULT '',
        description TEXT NOT NULL DEFAULT '',
        requirements TEXT,
        skills_json TEXT NOT NULL DEFAULT '[]',
        salary_min INTEGER,
        salary_max INTEGER,
        location TEXT,
        location_type TEXT,
        employment_type TEXT,
        experience_level TEXT,
        user_id TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS resumes (
        id TEXT PRIMARY KEY,
        user_id TEXT,
        full_name TEXT NOT NULL DEFAULT '',
        email TEXT NOT NULL DEFAULT '',
        skills_json TEXT NOT NULL DEFAULT '[]',
        experience TEXT NOT NULL DEFAULT '',
        education TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS job_resume_matches (
        id TEXT PRIMARY KEY,
        job_id TEXT NOT NULL,
        resume_id TEXT NOT NULL,
        match_percentage INTEGER NOT NULL,
        match_explanation TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_job_resume_matches_pair
    ON job_resume_matches (job_id, resume_id);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_job_resume_matches_resume
    ON job_resume_matches (resume_id);
    """,
)

_JOB_COLUMNS = (
    "id", "title", "company", "description", "requirements", "skills_json",
    "salary_min", "salary_max", "location", "location_type", "employment_type",
    "experience_level", "user_id", "created_at", "updated_at",
)
_RESUME_COLUMNS = (
    "id", "user_id", "full_name", "email", "skills_json",
    "experience", "education", "created_at", "updated_at",
)
_MATCH_COLUMNS = (
    "id", "job_id", "resume_id", "match_percentage",
    "match_explanation", "created_at", "updated_at",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | str | None) -> str:
    if value is None:
        return _utc_now().isoformat()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return str(value)


def _decode_skills(raw: str | None) -> list[Any] | str:
    if not raw:
        return []
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if decoded is None:
        return []
    if isinstance(decoded, (list, str)):
        return decoded
    # Scalars and objects fall back to raw text so the row still loads.
    return raw


def _validate(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise StoreError(
            f"Invalid {model.__name__} row id={data.get('id')}: {exc.error_count()} validation error(s)"
        ) from exc


def _row_with_skills(values: dict[str, Any]) -> dict[str, Any]:
    data = {key: value for key, value in values.items() if key != "skills_json"}
    data["skills"] = _decode_skills(values.get("skills_json"))
    return data


class SqliteDataStore:
    """sqlite-backed implementation of the job board tables used by matching."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.Lock()
        self._conn = self._connect()

    def _connect(self) -> sqlite3.Connection:
        if self._db_path != ":memory:":
            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        try:
            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            for statement in _SCHEMA:
                conn.execute(statement)
        except sqlite3.Error as exc:
            raise StoreError(f"Unable to open store at '{self._db_path}': {exc}") from exc
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            try:
                yield self._conn.cursor()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # jobs / resumes

    def get_job(self, job_id: str) -> Job | None:
        with self._cursor() as cur:
            cur.execute(f"SELECT {', '.join(_JOB_COLUMNS)} FROM jobs WHERE id = ?", (str(job_id),))
            row = cur.fetchone()
        if row is None:
            return None
        return _validate(Job, _row_with_skills(dict(row)))

    def list_resumes(self) -> list[Resume]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {', '.join(_RESUME_COLUMNS)} FROM resumes ORDER BY rowid")
            rows = cur.fetchall()
        return [_validate(Resume, _row_with_skills(dict(row))) for row in rows]

    def add_job(self, job: dict[str, Any]) -> Job:
        now = _utc_now()
        values = {
            "id": str(job.get("id") or uuid.uuid4().hex),
            "title": job.get("title") or "",
            "company": job.get("company") or "",
            "description": job.get("description") or "",
            "requirements": job.get("requirements"),
            "skills_json": json.dumps(job.get("skills") or [], ensure_ascii=False),
            "salary_min": job.get("salary_min"),
            "salary_max": job.get("salary_max"),
            "location": job.get("location"),
            "location_type": job.get("location_type"),
            "employment_type": job.get("employment_type"),
            "experience_level": job.get("experience_level"),
            "user_id": job.get("user_id"),
            "created_at": _iso(job.get("created_at") or now),
            "updated_at": _iso(job.get("updated_at") or now),
        }
        stored = _validate(Job, _row_with_skills(values))
        self._replace("jobs", values)
        return stored

    def add_resume(self, resume: dict[str, Any]) -> Resume:
        now = _utc_now()
        values = {
            "id": str(resume.get("id") or uuid.uuid4().hex),
            "user_id": resume.get("user_id"),
            "full_name": resume.get("full_name") or "",
            "email": resume.get("email") or "",
            "skills_json": json.dumps(resume.get("skills") or [], ensure_ascii=False),
            "experience": resume.get("experience") or "",
            "education": resume.get("education") or "",
            "created_at": _iso(resume.get("created_at") or now),
            "updated_at": _iso(resume.get("updated_at") or now),
        }
        stored = _validate(Resume, _row_with_skills(values))
        self._replace("resumes", values)
        return stored

    def _replace(self, table: str, values: dict[str, Any]) -> None:
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._cursor() as cur:
            cur.execute(
                f"INSERT OR REPLACE INTO {table} ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )

    # match records

    def list_matches_for_job(self, job_id: str) -> list[MatchRecord]:
        return self._select_matches(
            "WHERE job_id = ? ORDER BY match_percentage DESC, updated_at DESC", (str(job_id),)
        )

    def list_matches_for_resume(self, resume_id: str) -> list[MatchRecord]:
        return self._select_matches(
            "WHERE resume_id = ? ORDER BY match_percentage DESC, updated_at DESC", (str(resume_id),)
        )

    def get_match(self, job_id: str, resume_id: str) -> MatchRecord | None:
        rows = self._select_matches("WHERE job_id = ? AND resume_id = ?", (str(job_id), str(resume_id)))
        return rows[0] if rows else None

    def _select_matches(self, clause: str, params: tuple[Any, ...]) -> list[MatchRecord]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {', '.join(_MATCH_COLUMNS)} FROM job_resume_matches {clause}", params)
            rows = cur.fetchall()
        return [_validate(MatchRecord, dict(row)) for row in rows]

    def insert_match(
        self,
        *,
        job_id: str,
        resume_id: str,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> MatchRecord:
        match_id = uuid.uuid4().hex
        stamp = _iso(updated_at)
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO job_resume_matches (
                    id, job_id, resume_id, match_percentage, match_explanation, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (match_id, str(job_id), str(resume_id), int(match_percentage), match_explanation, stamp, stamp),
            )
        return MatchRecord(
            id=match_id,
            job_id=str(job_id),
            resume_id=str(resume_id),
            match_percentage=match_percentage,
            match_explanation=match_explanation,
            created_at=datetime.fromisoformat(stamp),
            updated_at=datetime.fromisoformat(stamp),
        )

    def update_match(
        self,
        match_id: str,
        *,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE job_resume_matches
                SET match_percentage = ?, match_explanation = ?, updated_at = ?
                WHERE id = ?
                """,
                (int(match_percentage), match_explanation, _iso(updated_at), match_id),
            )
            if cur.rowcount == 0:
                raise StoreError(f"Match record {match_id} not found")

    def upsert_match(
        self,
        *,
        job_id: str,
        resume_id: str,
        match_percentage: int,
        match_explanation: str,
        updated_at: datetime,
    ) -> MatchRecord:
        stamp = _iso(updated_at)
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO job_resume_matches (
                    id, job_id, resume_id, match_percentage, match_explanation, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (job_id, resume_id) DO UPDATE SET
                    match_percentage = excluded.match_percentage,
                    match_explanation = excluded.match_explanation,
                    updated_at = excluded.updated_at
                """,
                (uuid.uuid4().hex, str(job_id), str(resume_id), int(match_percentage), match_explanation, stamp, stamp),
            )
        record = self.get_match(job_id, resume_id)
        if record is None:
            raise StoreError(f"Match record for job={job_id} resume={resume_id} was not persisted")
        return record

    def delete_matches_for_job(self, job_id: str) -> int:
        with self._cursor() as cur:
            cur.execute("DELETE FROM job_resume_matches WHERE job_id = ?", (str(job_id),))
            deleted = cur.rowcount
        logger.info("match_records_deleted job_id=%s count=%s", job_id, deleted)
        return deleted
