"""Generated learning roadmaps. Every generation appends a row; history is newest first."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from careerpilot.database import Base


class LearningPlan(Base):
    __tablename__ = "learning_plans"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    target_role = Column(String(255), nullable=False, default="")
    plan_data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
