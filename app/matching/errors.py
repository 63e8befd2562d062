from __future__ import annotations


class MatchError(RuntimeError):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class JobNotFoundError(MatchError):
    def __init__(self, message: str = "Failed to fetch job details"):
        super().__init__(message, status_code=404)


class ResumeLoadError(MatchError):
    def __init__(self, message: str = "Failed to fetch resumes"):
        super().__init__(message, status_code=500)
