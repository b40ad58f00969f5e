import logging
import time

from sqlalchemy import text

from app.config import settings
from app.core.errors import RemoteUnavailable
from app.schemas.system import StatusCheck, SystemStatusResponse
from app.services import pipeline_client

logger = logging.getLogger(__name__)

_PLACEHOLDER_SECRET = "replace-with-a-long-random-secret-key"


def check_database(engine) -> StatusCheck:
    start = time.perf_counter()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT id FROM job_posts LIMIT 1"))
    except Exception as e:
        logger.warning("Status check: database unreachable: %s", e)
        return StatusCheck(name="Database", status="error", message="Database unreachable")
    latency_ms = int((time.perf_counter() - start) * 1000)
    return StatusCheck(name="Database", status="ok", message=f"Connected ({latency_ms}ms)")


def check_environment() -> StatusCheck:
    missing = []
    if not settings.database_url:
        missing.append("DATABASE_URL")
    if not settings.secret_key or settings.secret_key == _PLACEHOLDER_SECRET:
        missing.append("SECRET_KEY")
    if not settings.pipeline_trigger_url:
        missing.append("PIPELINE_TRIGGER_URL")
    if missing:
        return StatusCheck(
            name="Environment Variables",
            status="error",
            message=f"Missing configuration: {', '.join(missing)}",
        )
    return StatusCheck(name="Environment Variables", status="ok", message="All required vars set")


def check_authentication(user_id: str | None) -> StatusCheck:
    message = f"Logged in as {user_id}" if user_id else "Not logged in"
    return StatusCheck(name="Authentication", status="ok", message=message)


def check_pipeline(user_id: str | None) -> StatusCheck:
    name = "AI Gateway (pipeline function)"
    if not user_id:
        return StatusCheck(name=name, status="ok", message="Login required for full check")
    try:
        message = pipeline_client.probe_pipeline()
    except RemoteUnavailable as e:
        return StatusCheck(name=name, status="error", message=e.message)
    return StatusCheck(name=name, status="ok", message=message)


def get_system_status(engine, user_id: str | None) -> SystemStatusResponse:
    checks = [
        check_database(engine),
        check_environment(),
        check_authentication(user_id),
        check_pipeline(user_id),
    ]
    return SystemStatusResponse(healthy=all(c.status == "ok" for c in checks), checks=checks)
