"""Deterministic keyword scorer used when the AI scorer cannot answer."""
from __future__ import annotations

import math
from typing import Any

from app.schemas.matching import Job, MatchScore, Resume

FALLBACK_MARKER = "This is an automated keyword match used because AI scoring was unavailable."


def _skill_list(raw: Any) -> list[str]:
    # A single delimited string is treated as a comma separated list.
    if isinstance(raw, str):
        return [part.strip().lower() for part in raw.split(",")]
    if isinstance(raw, (list, tuple)):
        return [item.lower() if isinstance(item, str) else "" for item in raw]
    return []


def _raw_tokens(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",")]
    if isinstance(raw, (list, tuple)):
        return [item if isinstance(item, str) else "" for item in raw]
    return []


def fallback_score(job: Job, resume: Resume) -> MatchScore:
    """Score by bidirectional case-insensitive substring overlap of skills.

    A job skill counts once when any resume skill contains it or is contained
    by it ("React" vs "ReactJS"). An empty job skill list always yields 0%.
    """
    job_skills = _skill_list(job.skills)
    resume_skills = _skill_list(resume.skills)
    resume_tokens = _raw_tokens(resume.skills)

    match_count = 0
    matched: list[str] = []
    for job_skill in job_skills:
        if not job_skill:
            continue
        hit = False
        for index, resume_skill in enumerate(resume_skills):
            if not resume_skill:
                continue
            if resume_skill in job_skill or job_skill in resume_skill:
                hit = True
                token = resume_tokens[index]
                if token not in matched:
                    matched.append(token)
        if hit:
            match_count += 1

    total = max(len(job_skills), 1)
    # Half-up rounding, 12.5 -> 13.
    percentage = min(math.floor(match_count / total * 100 + 0.5), 100)
    explanation = (
        f"{FALLBACK_MARKER} "
        f"Based on keyword matching, found {match_count} skill matches out of {total} required skills. "
        f"Matched skills: {', '.join(matched) or 'None'}."
    )
    return MatchScore(match_percentage=percentage, explanation=explanation)
