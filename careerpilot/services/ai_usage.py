"""
Usage log for Gemini calls made on behalf of an owner.
Cached analyses are not logged: only calls that reach the provider count.
"""
from sqlalchemy.orm import Session

from careerpilot.models.ai_usage_log import AiUsageLog

FEATURE_RESUME = "resume"
FEATURE_ROADMAP = "roadmap"
FEATURE_QUIZ = "quiz"
FEATURE_INTERVIEW = "interview"
FEATURE_TTS = "tts"


def log_usage(
    db: Session,
    user_id: str,
    feature: str,
    metadata_: str | None = None,
) -> None:
    entry = AiUsageLog(
        user_id=user_id,
        feature=feature,
        metadata_=metadata_,
    )
    db.add(entry)
    db.commit()
