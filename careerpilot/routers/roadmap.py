"""
Learning roadmap endpoints:
- POST /api/roadmap — generate a plan for a target role and append it to history
- GET /api/roadmap — latest plan
- GET /api/roadmap/history — all plans, newest first
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careerpilot.auth import get_optional_profile, get_owner_id
from careerpilot.database import get_db
from careerpilot.models.learning_plan import LearningPlan
from careerpilot.models.profile import Profile
from careerpilot.repositories import history_repository
from careerpilot.routers.deps import ai_http_error
from careerpilot.schemas.roadmap import LearningRoadmap, RoadmapRequest
from careerpilot.services.ai_service import AnalysisServiceError, generate_roadmap
from careerpilot.services.ai_usage import FEATURE_ROADMAP, log_usage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roadmap", tags=["roadmap"])


def _to_roadmap(plan: LearningPlan) -> LearningRoadmap:
    roadmap = LearningRoadmap.model_validate(plan.plan_data)
    roadmap.id = plan.id
    roadmap.created_at = plan.updated_at.isoformat() if plan.updated_at else None
    return roadmap


@router.post("", response_model=LearningRoadmap)
def create_roadmap(
    body: RoadmapRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
    profile: Profile | None = Depends(get_optional_profile),
):
    """Generate a roadmap from the given skills (default: profile skills) toward target_role."""
    target_role = body.target_role.strip()
    skills = body.skills
    if skills is None:
        skills = list(profile.skills or []) if profile else []
    try:
        roadmap = generate_roadmap(skills, target_role)
    except AnalysisServiceError as e:
        logger.exception("Roadmap generation failed")
        raise ai_http_error(e) from e

    log_usage(db, owner_id, FEATURE_ROADMAP)
    plan = history_repository.save_learning_plan(
        db, owner_id, target_role, roadmap.model_dump(exclude={"id", "created_at"})
    )
    return _to_roadmap(plan)


@router.get("", response_model=LearningRoadmap)
def latest_roadmap(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    plan = history_repository.get_latest_learning_plan(db, owner_id)
    if not plan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No roadmap generated yet")
    return _to_roadmap(plan)


@router.get("/history", response_model=list[LearningRoadmap])
def roadmap_history(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    return [_to_roadmap(p) for p in history_repository.get_learning_plan_history(db, owner_id)]
