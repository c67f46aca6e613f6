"""
Bearer-token sessions issued on login and registration.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from app.core.security import utcnow
from app.db.base import Base


class AuthSession(Base):
    """
    One signed-in device. A user may hold any number of these at once.

    Rows are deleted on sign-out; expired rows stay until a mutating
    request or the reaper script touches them.
    """
    __tablename__ = "auth_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(64), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<AuthSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
