import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime
from careerpilot.database import Base


class QuizResult(Base):
    __tablename__ = "quizzes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    topic = Column(String(255), nullable=False)
    score = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    difficulty = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
