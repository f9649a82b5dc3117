"""Gemini usage log: one row per external generation call, for quota tracking."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from careerpilot.database import Base


class AiUsageLog(Base):
    __tablename__ = "ai_usage_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    feature = Column(String(32), nullable=False, index=True)  # "resume" | "roadmap" | "quiz" | "interview" | "tts"
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    metadata_ = Column("metadata", Text, nullable=True)  # JSON string for extra info
