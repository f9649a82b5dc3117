"""
Skill quiz endpoints:
- POST /api/quiz/generate — 5 multiple choice questions for a topic and level
- POST /api/quiz/submit — score answers and store the result
- GET /api/quiz/history — results, newest first
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from careerpilot.auth import get_owner_id
from careerpilot.database import get_db
from careerpilot.models.quiz_result import QuizResult
from careerpilot.repositories import history_repository
from careerpilot.routers.deps import ai_http_error
from careerpilot.schemas.quiz import QuizGenerateRequest, QuizQuestion, QuizResultResponse, QuizSubmitRequest
from careerpilot.services.ai_service import AnalysisServiceError, generate_quiz
from careerpilot.services.ai_usage import FEATURE_QUIZ, log_usage
from careerpilot.services.quiz_service import score_quiz

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


def quiz_result_response(r: QuizResult) -> QuizResultResponse:
    return QuizResultResponse(
        id=r.id,
        topic=r.topic,
        score=r.score,
        total=r.total,
        difficulty=r.difficulty,
        date=r.created_at.isoformat(),
    )


@router.post("/generate", response_model=list[QuizQuestion])
def create_quiz(
    body: QuizGenerateRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        questions = generate_quiz(body.topic.strip(), body.difficulty)
    except AnalysisServiceError as e:
        logger.exception("Quiz generation failed")
        raise ai_http_error(e) from e
    log_usage(db, owner_id, FEATURE_QUIZ)
    return questions


@router.post("/submit", response_model=QuizResultResponse)
def submit_quiz(
    body: QuizSubmitRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    """Score answers (question index -> option index) against the quiz and store the result."""
    score = score_quiz(body.questions, body.answers)
    result = history_repository.save_quiz_result(
        db, owner_id, body.topic.strip(), score, len(body.questions), body.difficulty
    )
    return quiz_result_response(result)


@router.get("/history", response_model=list[QuizResultResponse])
def quiz_history(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    return [quiz_result_response(r) for r in history_repository.get_quiz_history(db, owner_id)]
