from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from app.core.security import check_api_key
from app.matching.explanation import format_match_explanation, match_band
from app.schemas.matching import MatchRecordDetailResponse, MatchRecordListResponse
from app.store import DataStore, get_data_store

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_api_key(x_api_key)


def get_store(request: Request) -> DataStore:
    store = getattr(request.app.state, "data_store", None)
    return store if store is not None else get_data_store()


@router.get("/matches/jobs/{job_id}", response_model=MatchRecordListResponse)
def matches_for_job(job_id: str, store: DataStore = Depends(get_store), _: None = Depends(_auth)):
    return MatchRecordListResponse(matches=store.list_matches_for_job(job_id))


@router.get("/matches/resumes/{resume_id}", response_model=MatchRecordListResponse)
def matches_for_resume(resume_id: str, store: DataStore = Depends(get_store), _: None = Depends(_auth)):
    return MatchRecordListResponse(matches=store.list_matches_for_resume(resume_id))


@router.get("/matches/jobs/{job_id}/resumes/{resume_id}", response_model=MatchRecordDetailResponse)
def match_detail(
    job_id: str,
    resume_id: str,
    store: DataStore = Depends(get_store),
    _: None = Depends(_auth),
):
    record = store.get_match(job_id, resume_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found.")
    return MatchRecordDetailResponse(
        match=record,
        band=match_band(record.match_percentage),
        formatted_explanation=format_match_explanation(record.match_explanation),
    )
