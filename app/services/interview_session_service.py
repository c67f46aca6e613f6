"""
Interview session registry.

All operations take the requesting User explicitly and are scoped to it.
A session that exists but belongs to someone else is reported exactly like
a missing one.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidTransitionError, SessionNotFoundError, ValidationError
from app.core.security import utcnow
from app.db.models.interview_session import InterviewSession, SessionStatus
from app.db.models.user import User

logger = logging.getLogger(__name__)

# Same-status updates are allowed so a call id can be re-attached and a
# duplicate end-of-call event is harmless. completed is terminal.
ALLOWED_TRANSITIONS = {
    SessionStatus.PENDING: {SessionStatus.PENDING, SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED},
    SessionStatus.IN_PROGRESS: {SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED},
    SessionStatus.COMPLETED: {SessionStatus.COMPLETED},
}


def can_transition(current: SessionStatus, new: SessionStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def create_session(
    db: Session,
    owner: User,
    job_title: str,
    resume_text: str,
    job_description: Optional[str] = None,
) -> InterviewSession:
    """Create a pending session from already-extracted resume text."""
    job_title = (job_title or "").strip()
    if not job_title:
        raise ValidationError("Job title is required")
    if not resume_text or not resume_text.strip():
        raise ValidationError("Resume text is required")

    now = utcnow()
    session = InterviewSession(
        user_id=owner.id,
        job_title=job_title,
        job_description=job_description.strip() if job_description and job_description.strip() else None,
        resume_text=resume_text,
        status=SessionStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    db.add(session)
    db.commit()
    db.refresh(session)

    logger.info(f"Interview session created: session_id={session.id}, user_id={owner.id}")
    return session


def get_session(db: Session, owner: User, session_id: int) -> InterviewSession:
    session = db.get(InterviewSession, session_id)
    if session is None or session.user_id != owner.id:
        raise SessionNotFoundError()
    return session


def list_sessions(db: Session, owner: User) -> List[InterviewSession]:
    """Owner's sessions, newest first."""
    return (
        db.query(InterviewSession)
        .filter(InterviewSession.user_id == owner.id)
        .order_by(InterviewSession.created_at.desc(), InterviewSession.id.desc())
        .all()
    )


def transition_session(
    db: Session,
    owner: User,
    session_id: int,
    new_status: SessionStatus,
    external_call_id: Optional[str] = None,
) -> InterviewSession:
    """
    Move a session to new_status, optionally attaching the voice call id.

    Concurrent updates are last-write-wins.

    Raises:
        SessionNotFoundError: missing or not owned by the requester
        InvalidTransitionError: the state machine forbids the move
    """
    session = get_session(db, owner, session_id)
    new_status = SessionStatus(new_status)
    current = SessionStatus(session.status)

    if not can_transition(current, new_status):
        raise InvalidTransitionError(
            f"Cannot move session from {current.value} to {new_status.value}"
        )

    session.status = new_status.value
    if external_call_id:
        session.external_call_id = external_call_id
    session.updated_at = utcnow()
    db.commit()
    db.refresh(session)

    logger.info(
        f"Interview session {session.id}: {current.value} -> {new_status.value}"
    )
    return session


def delete_session(db: Session, owner: User, session_id: int) -> None:
    session = get_session(db, owner, session_id)
    db.delete(session)
    db.commit()
    logger.info(f"Interview session deleted: session_id={session_id}, user_id={owner.id}")
