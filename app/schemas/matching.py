from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MatchBand = Literal["excellent", "good", "fair", "low", "none"]


class Job(BaseModel):
    """Job posting as stored by the recruiter portal. Read-only for matching."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    company: str = ""
    description: str = ""
    requirements: str | None = None
    skills: list[Any] | str | None = Field(default_factory=list)
    salary_min: int | None = None
    salary_max: int | None = None
    location: str | None = None
    location_type: str | None = None
    employment_type: str | None = None
    experience_level: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class Resume(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str | None = None
    full_name: str = ""
    email: str = ""
    skills: list[Any] | str | None = Field(default_factory=list)
    experience: str = ""
    education: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class MatchRecord(BaseModel):
    id: str
    job_id: str
    resume_id: str
    match_percentage: int = Field(ge=0, le=100)
    match_explanation: str = ""
    created_at: datetime | None = None
    updated_at: datetime

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _clamp_percentage(cls, value: Any) -> int:
        try:
            number = int(round(float(value)))
        except (TypeError, ValueError):
            return 0
        return max(0, min(number, 100))


class MatchScore(BaseModel):
    match_percentage: int = Field(ge=0, le=100)
    explanation: str = ""


class MatchRequest(BaseModel):
    job_id: str | None = Field(default=None, alias="jobId")

    @field_validator("job_id", mode="before")
    @classmethod
    def _coerce_job_id(cls, value: Any) -> str | None:
        if value is None or isinstance(value, (dict, list, bool)):
            return None
        text = str(value).strip()
        return text or None


class MatchExplanationSection(BaseModel):
    title: str
    content: str


class FormattedExplanation(BaseModel):
    overview: str
    sections: list[MatchExplanationSection] = Field(default_factory=list)


class MatchRecordListResponse(BaseModel):
    matches: list[MatchRecord] = Field(default_factory=list)


class MatchRecordDetailResponse(BaseModel):
    match: MatchRecord
    band: MatchBand
    formatted_explanation: FormattedExplanation
