from fastapi import APIRouter, Depends

import app.database as database
from app.dependencies import get_optional_user_id
from app.schemas.system import SystemStatusResponse
from app.services.system_status_service import get_system_status

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/status", response_model=SystemStatusResponse)
def system_status(user_id: str | None = Depends(get_optional_user_id)):
    """Database, configuration, session and pipeline-function checks for the status page."""
    return get_system_status(database.engine, user_id)
