"""
Resume analysis rows (the analysis cache table). Insert and filtered query only;
rows are never updated or deleted here.
All operations are sync (called from run_in_executor by the cache).
"""
from datetime import datetime
from typing import Any

from sqlalchemy import desc
from sqlalchemy.orm import Session

from careerpilot.models.resume import ResumeAnalysisEntry


def find_latest_by_hash(
    db: Session,
    user_id: str,
    hash_: str,
    target_role: str,
) -> ResumeAnalysisEntry | None:
    """Newest entry for (user_id, hash, target_role); id breaks created_at ties."""
    return (
        db.query(ResumeAnalysisEntry)
        .filter(
            ResumeAnalysisEntry.user_id == user_id,
            ResumeAnalysisEntry.hash == hash_,
            ResumeAnalysisEntry.target_role == target_role,
        )
        .order_by(desc(ResumeAnalysisEntry.created_at), desc(ResumeAnalysisEntry.id))
        .limit(1)
        .first()
    )


def insert_analysis(
    db: Session,
    user_id: str,
    hash_: str,
    target_role: str,
    analysis: dict[str, Any],
    *,
    content: str = "",
    created_at: datetime | None = None,
) -> ResumeAnalysisEntry:
    """Append one entry. No duplicate check: concurrent identical submissions may both land."""
    entry = ResumeAnalysisEntry(
        user_id=user_id,
        hash=hash_,
        target_role=target_role,
        content=content,
        analysis=analysis,
    )
    if created_at is not None:
        entry.created_at = created_at
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_latest_resume(db: Session, user_id: str) -> ResumeAnalysisEntry | None:
    """Most recent analysis of any resume for user (dashboard ATS score, profile bootstrap)."""
    return (
        db.query(ResumeAnalysisEntry)
        .filter(ResumeAnalysisEntry.user_id == user_id)
        .order_by(desc(ResumeAnalysisEntry.created_at), desc(ResumeAnalysisEntry.id))
        .first()
    )


class ResumeRepository:
    """Thin wrapper for dependency injection; delegates to module functions."""

    @staticmethod
    def find_latest_by_hash(db: Session, user_id: str, hash_: str, target_role: str) -> ResumeAnalysisEntry | None:
        return find_latest_by_hash(db, user_id, hash_, target_role)

    @staticmethod
    def insert_analysis(
        db: Session,
        user_id: str,
        hash_: str,
        target_role: str,
        analysis: dict[str, Any],
        *,
        content: str = "",
        created_at: datetime | None = None,
    ) -> ResumeAnalysisEntry:
        return insert_analysis(
            db, user_id, hash_, target_role, analysis,
            content=content,
            created_at=created_at,
        )

    @staticmethod
    def get_latest_resume(db: Session, user_id: str) -> ResumeAnalysisEntry | None:
        return get_latest_resume(db, user_id)
