from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from careerpilot.auth import get_current_profile
from careerpilot.database import get_db
from careerpilot.models.profile import Profile
from careerpilot.repositories import profile_repository
from careerpilot.routers.auth import profile_response
from careerpilot.schemas.profile import ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse)
def get_me(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    return profile_response(db, profile)


@router.patch("/me", response_model=ProfileResponse)
def update_me(
    body: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Update name, target role and/or skills."""
    profile = profile_repository.update_profile(
        db, profile,
        name=body.name,
        target_role=body.target_role,
        skills=body.skills,
    )
    return profile_response(db, profile)
