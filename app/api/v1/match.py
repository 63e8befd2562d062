import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.matching import MatchError, MatchOrchestrator, build_match_orchestrator
from app.schemas.matching import MatchRequest

router = APIRouter()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def get_match_orchestrator(request: Request) -> MatchOrchestrator:
    orchestrator = getattr(request.app.state, "match_orchestrator", None)
    if orchestrator is None:
        orchestrator = build_match_orchestrator()
        request.app.state.match_orchestrator = orchestrator
    return orchestrator


def _json(payload: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code, headers=CORS_HEADERS)


async def _read_job_id(request: Request) -> str | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return MatchRequest.model_validate(body).job_id


@router.options("/match-resume", include_in_schema=False)
async def match_resume_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/match-resume", summary="Score every resume against a job posting")
@rate_limit(settings.match_rate_limit)
async def match_resume(
    request: Request,
    orchestrator: MatchOrchestrator = Depends(get_match_orchestrator),
):
    try:
        job_id = await _read_job_id(request)
        if not job_id:
            return _json({"error": "Job ID is required"}, status_code=400)

        results = await run_in_threadpool(orchestrator.match_job_against_resumes, job_id)
        return _json({"results": results})
    except MatchError as exc:
        return _json({"error": str(exc)}, status_code=exc.status_code)
    except Exception as exc:  # noqa: BLE001 - surfaced to the caller as a 500 body
        logger.exception("match_resume_failed")
        return _json({"error": str(exc)}, status_code=500)
