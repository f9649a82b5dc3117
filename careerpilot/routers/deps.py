"""Shared router dependencies and the Gemini error -> HTTP mapping."""
from fastapi import HTTPException, status

from careerpilot.config import get_settings
from careerpilot.services.ai_service import (
    AnalysisAuthError,
    AnalysisResponseError,
    AnalysisServiceError,
    AnalysisUnavailableError,
)
from careerpilot.services.analysis_cache import get_analysis_cache
from careerpilot.services.resume_service import ResumeAnalysisService


def get_resume_service() -> ResumeAnalysisService:
    """Resume analysis over the process-wide cache (or uncached when disabled in settings)."""
    cache = get_analysis_cache() if get_settings().analysis_cache_enabled else None
    return ResumeAnalysisService(cache=cache)


def ai_http_error(e: AnalysisServiceError) -> HTTPException:
    if isinstance(e, AnalysisAuthError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="AI key rejected or not configured. Please select another API key.",
        )
    if isinstance(e, AnalysisUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI service temporarily unavailable. Please try again later.",
        )
    if isinstance(e, AnalysisResponseError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="AI returned an unreadable response. Please try again or check your document format.",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="AI request failed. Please try again later.",
    )
