"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from app.db.models.user import User
from app.db.models.auth_session import AuthSession
from app.db.models.interview_session import InterviewSession, SessionStatus

__all__ = [
    "User",
    "AuthSession",
    "InterviewSession",
    "SessionStatus",
]
