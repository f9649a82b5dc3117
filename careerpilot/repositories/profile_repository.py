"""Profile persistence. Profiles are keyed by id and looked up by email at login."""
from sqlalchemy.orm import Session

from careerpilot.models.profile import Profile


def get_profile_by_email(db: Session, email: str) -> Profile | None:
    return db.query(Profile).filter(Profile.email == email.strip().lower()).first()


def upsert_profile(
    db: Session,
    email: str,
    name: str,
    *,
    target_role: str | None = None,
    skills: list[str] | None = None,
) -> Profile:
    """Create the profile for email, or update name (and optional fields) of the existing one."""
    email = email.strip().lower()
    profile = get_profile_by_email(db, email)
    if profile is None:
        profile = Profile(email=email, name=name, target_role=target_role or "", skills=skills or [])
        db.add(profile)
    else:
        if name:
            profile.name = name
        if target_role is not None:
            profile.target_role = target_role
        if skills is not None:
            profile.skills = list(skills)
    db.commit()
    db.refresh(profile)
    return profile


def update_profile(
    db: Session,
    profile: Profile,
    *,
    name: str | None = None,
    target_role: str | None = None,
    skills: list[str] | None = None,
) -> Profile:
    if name is not None:
        profile.name = name
    if target_role is not None:
        profile.target_role = target_role
    if skills is not None:
        profile.skills = list(skills)
    db.commit()
    db.refresh(profile)
    return profile
