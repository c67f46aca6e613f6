"""
Pydantic schemas for the interview coach config endpoint.
"""
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

FocusArea = Annotated[str, Field(min_length=2, max_length=80)]


class CoachConfig(BaseModel):
    """Opening line, interviewer instructions and focus areas for the voice agent."""
    first_message: str = Field(..., min_length=40, max_length=600, description="First thing the interviewer says")
    system_prompt: str = Field(..., min_length=300, description="Hidden interviewer instructions")
    focus_areas: List[FocusArea] = Field(..., min_length=3, max_length=6, description="3-6 areas to probe")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RawCoachConfig(BaseModel):
    """Loosely-typed model output before cleanup and strict validation."""
    first_message: str = ""
    system_prompt: str = ""
    focus_areas: List[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CoachConfigRequest(BaseModel):
    """Request schema for POST /interview/coach-config."""
    job_title: str = Field(..., min_length=1, max_length=120, description="Role being interviewed for")
    job_description: Optional[str] = Field(None, max_length=50_000, description="Job description (optional)")
    resume_text: str = Field(..., min_length=10, max_length=200_000, description="Extracted resume text")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "jobTitle": "Backend Engineer",
                "jobDescription": "Build and operate Go and Python services.",
                "resumeText": "5 years Go, Kubernetes, PostgreSQL..."
            }
        }


class CoachConfigResponse(BaseModel):
    """Response schema; success is true even when the fallback was used."""
    success: bool = True
    source: str = Field(..., description="'model' or 'fallback'")
    data: CoachConfig
