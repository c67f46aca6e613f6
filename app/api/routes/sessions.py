"""
Interview session endpoints.

Every route resolves the caller through the auth gate; reads use the
non-mutating path and writes use the reaping path.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_current_user_for_write, get_db
from app.db.models.user import User
from app.schemas.auth import SuccessResponse
from app.schemas.interview_session import (
    SessionCreate,
    SessionEnvelope,
    SessionListResponse,
    SessionResponse,
    SessionStatusUpdate,
)
from app.services import interview_session_service
from app.services.resume_parser import parse_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Interview Sessions"])


@router.get("", response_model=SessionListResponse)
def list_sessions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's interview sessions, newest first."""
    sessions = interview_session_service.list_sessions(db, user)
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions],
        total=len(sessions),
    )


@router.get("/{session_id}", response_model=SessionEnvelope)
def get_session(
    session_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    session = interview_session_service.get_session(db, user, session_id)
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SessionEnvelope)
def create_session(
    payload: SessionCreate,
    user: User = Depends(get_current_user_for_write),
    db: Session = Depends(get_db)
):
    session = interview_session_service.create_session(
        db,
        user,
        job_title=payload.job_title,
        resume_text=payload.resume_text,
        job_description=payload.job_description,
    )
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=SessionEnvelope)
def create_session_from_pdf(
    job_title: str = Form(..., alias="jobTitle"),
    job_description: Optional[str] = Form(None, alias="jobDescription"),
    resume_pdf: UploadFile = File(..., alias="resumePdf"),
    user: User = Depends(get_current_user_for_write),
    db: Session = Depends(get_db)
):
    """Create a session from an uploaded PDF resume."""
    resume_text = parse_resume(resume_pdf.file.read())
    session = interview_session_service.create_session(
        db,
        user,
        job_title=job_title,
        resume_text=resume_text,
        job_description=job_description,
    )
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.patch("/{session_id}/status", response_model=SessionEnvelope)
def update_session_status(
    session_id: int,
    payload: SessionStatusUpdate,
    user: User = Depends(get_current_user_for_write),
    db: Session = Depends(get_db)
):
    session = interview_session_service.transition_session(
        db,
        user,
        session_id,
        new_status=payload.status,
        external_call_id=payload.external_call_id,
    )
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.delete("/{session_id}", response_model=SuccessResponse)
def delete_session(
    session_id: int,
    user: User = Depends(get_current_user_for_write),
    db: Session = Depends(get_db)
):
    interview_session_service.delete_session(db, user, session_id)
    return SuccessResponse()
