"""
Resume analyses. Each row doubles as an analysis cache entry keyed by
(user_id, hash, target_role); rows are append-only and the latest one wins.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from careerpilot.database import Base


class ResumeAnalysisEntry(Base):
    __tablename__ = "resumes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # No FK: guest submissions are stored under the placeholder owner id
    user_id = Column(String(36), nullable=False, index=True)
    hash = Column(String(64), nullable=False)  # sha256(content + target_role)
    target_role = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")  # pasted text or "PDF Upload: <name>"
    analysis = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Not unique: concurrent identical submissions may both append
    __table_args__ = (Index("ix_resumes_user_hash_role", "user_id", "hash", "target_role", "created_at"),)
