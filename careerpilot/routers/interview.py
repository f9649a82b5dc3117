"""
Mock interview endpoints:
- GET /api/interview/rounds — round order, question counts, lock/pass status
- POST /api/interview/feedback — Gemini evaluation of one answer
- POST /api/interview/complete — score a finished round and store it
- GET /api/interview/history — finished rounds, newest first
- POST /api/interview/speech — interviewer voice (base64 PCM, may be null)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careerpilot.auth import get_optional_profile, get_owner_id
from careerpilot.database import get_db
from careerpilot.models.interview_result import InterviewResult
from careerpilot.models.profile import Profile
from careerpilot.repositories import history_repository
from careerpilot.routers.deps import ai_http_error
from careerpilot.schemas.interview import (
    InterviewCompleteRequest,
    InterviewFeedback,
    InterviewFeedbackRequest,
    InterviewResultResponse,
    RoundStatus,
    SpeechRequest,
    SpeechResponse,
)
from careerpilot.services import interview_service
from careerpilot.services.ai_service import AnalysisServiceError, get_interview_feedback, text_to_speech
from careerpilot.services.ai_usage import FEATURE_INTERVIEW, FEATURE_TTS, log_usage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview", tags=["interview"])


def interview_result_response(r: InterviewResult) -> InterviewResultResponse:
    return InterviewResultResponse(
        id=r.id,
        role=r.role,
        round_type=r.round_type,
        score=r.score,
        feedback=r.feedback,
        passed=r.passed,
        date=r.created_at.isoformat(),
    )


def _role(requested: str | None, profile: Profile | None) -> str:
    if requested and requested.strip():
        return requested.strip()
    return (profile.target_role if profile else "") or "Software Engineer"


@router.get("/rounds", response_model=list[RoundStatus])
def list_rounds(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    history = history_repository.get_interview_history(db, owner_id)
    return interview_service.round_statuses(history)


@router.get("/rounds/{round_name}/greeting")
def round_greeting(round_name: str):
    for r in interview_service.ROUND_ORDER:
        if r.value.lower() == round_name.lower():
            return {"round": r.value, "greeting": interview_service.GREETINGS[r]}
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown interview round")


@router.post("/feedback", response_model=InterviewFeedback)
def answer_feedback(
    body: InterviewFeedbackRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    profile: Profile | None = Depends(get_optional_profile),
):
    try:
        feedback = get_interview_feedback(body.question, body.answer, _role(body.role, profile), body.round)
    except AnalysisServiceError as e:
        logger.exception("Interview feedback failed")
        raise ai_http_error(e) from e
    log_usage(db, owner_id, FEATURE_INTERVIEW)
    return feedback


@router.post("/complete", response_model=InterviewResultResponse)
def complete_round(
    body: InterviewCompleteRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    profile: Profile | None = Depends(get_optional_profile),
):
    """Average the round's answer scores; 60+ passes and unlocks the next round."""
    history = history_repository.get_interview_history(db, owner_id)
    try:
        score, passed, feedback = interview_service.evaluate_round(body.round, body.scores, history)
    except interview_service.InterviewRoundError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    result = history_repository.save_interview_result(
        db, owner_id, _role(body.role, profile), body.round.value, score, feedback, passed
    )
    return interview_result_response(result)


@router.get("/history", response_model=list[InterviewResultResponse])
def interview_history(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    return [interview_result_response(r) for r in history_repository.get_interview_history(db, owner_id)]


@router.post("/speech", response_model=SpeechResponse)
def interviewer_speech(
    body: SpeechRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    """Audio is optional: audio=null when TTS fails, the interview continues as text."""
    audio = text_to_speech(body.text)
    if audio:
        log_usage(db, owner_id, FEATURE_TTS)
    return SpeechResponse(audio=audio)
