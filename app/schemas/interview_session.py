"""
Pydantic schemas for interview session endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.db.models.interview_session import SessionStatus


class SessionCreate(BaseModel):
    """Schema for creating a session from already-extracted resume text."""
    job_title: str = Field(..., min_length=1, max_length=200, description="Role being practised for")
    job_description: Optional[str] = Field(None, description="Job description (optional)")
    resume_text: str = Field(..., min_length=1, description="Extracted resume text")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "jobTitle": "Backend Engineer",
                "jobDescription": "Own the payments API.",
                "resumeText": "5 years Go..."
            }
        }


class SessionStatusUpdate(BaseModel):
    """Schema for moving a session through its lifecycle."""
    status: SessionStatus = Field(..., description="pending | in_progress | completed")
    external_call_id: Optional[str] = Field(None, max_length=255, description="Voice call id to attach")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SessionResponse(BaseModel):
    id: int
    user_id: int
    job_title: str
    job_description: Optional[str] = None
    resume_text: str
    external_call_id: Optional[str] = None
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class SessionEnvelope(BaseModel):
    success: bool = True
    session: SessionResponse


class SessionListResponse(BaseModel):
    success: bool = True
    sessions: List[SessionResponse] = Field(..., description="Newest first")
    total: int
