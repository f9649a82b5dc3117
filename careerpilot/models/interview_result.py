"""Completed mock interview rounds (one row per finished round)."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime
from careerpilot.database import Base


class InterviewResult(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    role = Column(String(255), nullable=False, default="")
    round_type = Column(String(32), nullable=False)  # "Technical" | "Managerial" | "HR"
    score = Column(Integer, nullable=False)
    feedback = Column(Text, nullable=False, default="")
    passed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
