from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from careerpilot.auth import get_owner_id
from careerpilot.database import get_db
from careerpilot.repositories import history_repository, resume_repository
from careerpilot.routers.interview import interview_result_response
from careerpilot.routers.quiz import quiz_result_response
from careerpilot.schemas.progress import ProgressResponse
from careerpilot.services.progress_service import compute_stats

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("", response_model=ProgressResponse)
def get_progress(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    """Dashboard numbers plus quiz and interview history for the current owner."""
    quizzes = history_repository.get_quiz_history(db, owner_id)
    interviews = history_repository.get_interview_history(db, owner_id)
    latest = resume_repository.get_latest_resume(db, owner_id)
    return ProgressResponse(
        stats=compute_stats(quizzes, interviews, latest),
        quiz_history=[quiz_result_response(q) for q in quizzes],
        interview_history=[interview_result_response(i) for i in interviews],
    )
