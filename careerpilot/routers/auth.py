"""
Sign up / login by email. Both return a bearer token and the profile
(with the latest resume text, so the client can restore its state).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careerpilot.auth import create_access_token
from careerpilot.database import get_db
from careerpilot.models.profile import Profile
from careerpilot.repositories import profile_repository, resume_repository
from careerpilot.schemas.profile import LoginRequest, ProfileResponse, SignupRequest, TokenResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


def profile_response(db: Session, profile: Profile) -> ProfileResponse:
    latest = resume_repository.get_latest_resume(db, profile.id)
    return ProfileResponse(
        id=profile.id,
        name=profile.name,
        email=profile.email,
        target_role=profile.target_role or "",
        skills=list(profile.skills or []),
        resume_text=latest.content if latest else "",
    )


def _token_response(db: Session, profile: Profile) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(profile.id, profile.email),
        profile=profile_response(db, profile),
    )


@router.post("/signup", response_model=TokenResponse)
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """Create the profile (or refresh the name of an existing one) and log in."""
    profile = profile_repository.upsert_profile(db, body.email, body.name)
    return _token_response(db, profile)


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    profile = profile_repository.get_profile_by_email(db, body.email)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found. Please sign up first.",
        )
    return _token_response(db, profile)
