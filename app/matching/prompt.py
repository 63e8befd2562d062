from __future__ import annotations

from typing import Any

from app.schemas.matching import Job, Resume

NOT_SPECIFIED = "Not specified"


def _text(value: Any) -> str:
    if value is None:
        return NOT_SPECIFIED
    text = str(value).strip()
    return text or NOT_SPECIFIED


def _skills_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return _text(", ".join(str(item) for item in value))
    return _text(value)


def build_job_section(job: Job) -> str:
    return "\n".join(
        [
            f"Job Title: {_text(job.title)}",
            f"Description: {_text(job.description)}",
            f"Requirements: {_text(job.requirements)}",
            f"Skills Required: {_skills_text(job.skills)}",
        ]
    )


def build_base_prompt(job: Job) -> str:
    """Job-level part of the scoring prompt, built once per match run."""
    return (
        "You are an expert AI recruiter assistant comparing a job posting with a candidate's resume.\n"
        "Based on the skills, experience, and requirements, provide a percentage match score (0-100) "
        "with a detailed explanation.\n\n"
        "Consider these factors in your evaluation:\n"
        "1. Exact skill matches: Direct matches between resume skills and job requirements\n"
        "2. Related skills: Skills that are not exact matches but related to the job requirements\n"
        "3. Experience level: Whether the candidate's experience aligns with the job\n"
        "4. Education: How relevant the candidate's education is for the position\n"
        "5. Overall suitability: An overall assessment of how well the candidate fits\n\n"
        "JOB POSTING:\n"
        f"{build_job_section(job)}\n\n"
        "Please respond with ONLY a JSON object in this format:\n"
        "{\n"
        '  "matchPercentage": 75,\n'
        '  "explanation": "Detailed explanation of the match score with specific points that match or don\'t match"\n'
        "}\n"
    )


def build_resume_section(resume: Resume) -> str:
    return "\n".join(
        [
            "RESUME:",
            f"Full Name: {_text(resume.full_name)}",
            f"Email: {_text(resume.email)}",
            f"Skills: {_skills_text(resume.skills)}",
            f"Experience: {_text(resume.experience)}",
            f"Education: {_text(resume.education)}",
        ]
    )


def build_match_prompt(base_prompt: str, resume: Resume) -> str:
    return f"{base_prompt}\n{build_resume_section(resume)}"
