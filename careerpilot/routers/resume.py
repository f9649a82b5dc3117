"""
Resume AI endpoints:
- POST /api/resume/analyze — pasted text + target role (cached per owner)
- POST /api/resume/analyze-file — PDF/TXT upload + target role (cached on the base64 payload)
- GET /api/resume/latest — latest analysis of the current owner
"""
import base64
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from careerpilot.auth import get_optional_profile, get_owner_id
from careerpilot.database import get_db
from careerpilot.models.profile import Profile
from careerpilot.repositories import profile_repository, resume_repository
from careerpilot.routers.deps import ai_http_error, get_resume_service
from careerpilot.schemas.resume import (
    LatestResumeResponse,
    ResumeAnalysis,
    ResumeAnalyzeRequest,
    ResumeAnalyzeResponse,
)
from careerpilot.services.ai_service import AnalysisServiceError
from careerpilot.services.ai_usage import FEATURE_RESUME, log_usage
from careerpilot.services.resume_service import ResumeAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["resume"])

ALLOWED_UPLOAD_TYPES = {"application/pdf", "text/plain"}
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB


async def _run_analysis(
    db: Session,
    service: ResumeAnalysisService,
    owner_id: str,
    profile: Profile | None,
    content: str,
    target_role: str,
    *,
    mime_type: str | None = None,
    content_label: str | None = None,
) -> ResumeAnalyzeResponse:
    try:
        outcome = await service.analyze(
            owner_id, content, target_role,
            mime_type=mime_type,
            content_label=content_label,
        )
    except AnalysisServiceError as e:
        logger.exception("Resume analysis failed")
        raise ai_http_error(e) from e

    if not outcome.from_cache:
        log_usage(db, owner_id, FEATURE_RESUME)

    if profile is not None:
        # Remember the role and extracted skills for roadmap / interview defaults
        try:
            profile_repository.update_profile(
                db, profile,
                target_role=target_role,
                skills=outcome.analysis.extracted_skills,
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Profile update after analysis failed for %s: %s", profile.id, e)

    return ResumeAnalyzeResponse(analysis=outcome.analysis, from_cache=outcome.from_cache)


@router.post("/analyze", response_model=ResumeAnalyzeResponse)
async def analyze_resume_text(
    body: ResumeAnalyzeRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    profile: Profile | None = Depends(get_optional_profile),
    service: ResumeAnalysisService = Depends(get_resume_service),
):
    """
    ATS analysis of pasted resume text for a target role.
    Same text + role for the same owner returns the stored analysis without calling Gemini.
    """
    target_role = body.target_role.strip()
    if not target_role:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please specify the target job role first.")
    if not body.resume_text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please provide your resume text.")
    return await _run_analysis(db, service, owner_id, profile, body.resume_text, target_role)


@router.post("/analyze-file", response_model=ResumeAnalyzeResponse)
async def analyze_resume_file(
    target_role: str = Form(..., min_length=1, max_length=255),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    profile: Profile | None = Depends(get_optional_profile),
    service: ResumeAnalysisService = Depends(get_resume_service),
):
    """ATS analysis of an uploaded PDF or TXT resume. The base64 document is the cache content."""
    target_role = target_role.strip()
    if not target_role:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please specify the target job role first.")

    ct = (file.content_type or "").split(";")[0].strip().lower()
    if ct not in ALLOWED_UPLOAD_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload a PDF or TXT file.",
        )

    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File too large (max 10 MB).")

    encoded = base64.b64encode(data).decode("ascii")
    return await _run_analysis(
        db, service, owner_id, profile, encoded, target_role,
        mime_type=ct,
        content_label=f"PDF Upload: {file.filename or 'resume'}",
    )


@router.get("/latest", response_model=LatestResumeResponse)
def latest_resume(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    entry = resume_repository.get_latest_resume(db, owner_id)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No resume analyzed yet")
    try:
        analysis = ResumeAnalysis.model_validate(entry.analysis)
    except ValidationError as e:
        logger.warning("Latest resume analysis %s is unreadable: %s", entry.id, e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No readable resume analysis yet") from e
    return LatestResumeResponse(
        content=entry.content,
        target_role=entry.target_role,
        analysis=analysis,
        created_at=entry.created_at,
    )
