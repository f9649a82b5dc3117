"""Career profile: one row per user. The id is the owner id used by every other table."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from careerpilot.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=False, index=True)
    target_role = Column(String(255), nullable=False, default="")
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
