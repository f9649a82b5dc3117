"""
AI link endpoints:
- GET /api/ai/health — ping Gemini with the current key
- POST /api/ai/reset-client — rebuild the Gemini client after the key was changed
"""
import logging

from fastapi import APIRouter

from careerpilot.schemas.ai import AiHealthResponse
from careerpilot.services.ai_service import check_connectivity, reset_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.get("/health", response_model=AiHealthResponse)
def ai_health():
    if check_connectivity():
        return AiHealthResponse(status="ok")
    return AiHealthResponse(status="failed", message="API blocked or key invalid")


@router.post("/reset-client", response_model=AiHealthResponse)
def ai_reset_client():
    """Credential reselection: drop the cached client so the next call picks up the new key."""
    reset_client()
    return AiHealthResponse(status="ok", message="Gemini client will be rebuilt on next call")
