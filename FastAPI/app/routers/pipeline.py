import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_access_token, get_current_user_id
from app.services.pipeline_client import trigger_pipeline

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/pipeline", tags=["pipeline"])


@router.post("/run")
def run_pipeline(
    user_id: str = Depends(get_current_user_id),
    token: str = Depends(get_access_token),
):
    """
    Check today's open roles: forwards to the external run-daily function.
    An incomplete profile comes back as 409 ONBOARDING_INCOMPLETE with the missing parts.
    """
    logger.info("Pipeline run requested by user=%s", user_id)
    result = trigger_pipeline(token)
    return {"started": True, "result": result}
