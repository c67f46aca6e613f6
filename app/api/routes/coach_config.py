import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.llm.openai_provider import get_llm_provider
from app.llm.provider import LLMProvider
from app.schemas.coach_config import CoachConfigRequest, CoachConfigResponse
from app.services.coach_config_service import generate_coach_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interview", tags=["Interview Coach"])


def get_coach_provider() -> Optional[LLMProvider]:
    """LLM provider dependency; None when the model is not configured."""
    try:
        return get_llm_provider()
    except Exception as e:
        logger.warning(f"Failed to initialize LLM provider, coach config will use fallback: {e}")
        return None


# Sync handler: FastAPI runs it in the threadpool, so the model call
# never blocks other requests.
@router.post("/coach-config", response_model=CoachConfigResponse)
def coach_config(
    payload: CoachConfigRequest,
    provider: Optional[LLMProvider] = Depends(get_coach_provider),
):
    """
    Build the voice interviewer config.

    Always answers success=true for a well-formed request; `source` says
    whether the model or the template fallback produced `data`.
    """
    source, config = generate_coach_config(
        job_title=payload.job_title,
        resume_text=payload.resume_text,
        job_description=payload.job_description,
        provider=provider,
    )
    return CoachConfigResponse(source=source, data=config)
