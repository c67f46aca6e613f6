"""
Interview session model: one mock-interview attempt owned by a user.
"""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from app.core.security import utcnow
from app.db.base import Base


class SessionStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Role metadata
    job_title = Column(String, nullable=False)
    job_description = Column(Text, nullable=True)
    resume_text = Column(Text, nullable=False)

    # Voice call id attached when the call starts
    external_call_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default=SessionStatus.PENDING.value)  # pending / in_progress / completed

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_interview_sessions_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<InterviewSession(id={self.id}, job_title='{self.job_title}', status='{self.status}')>"
