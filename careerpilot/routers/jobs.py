from fastapi import APIRouter, Query

from careerpilot.schemas.jobs import JobRecommendation
from careerpilot.services.job_board import search_jobs

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("", response_model=list[JobRecommendation])
def list_jobs(q: str | None = Query(None, max_length=200)):
    """Job board; q filters on title, company and description (case-insensitive)."""
    return search_jobs(q)
