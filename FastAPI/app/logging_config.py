import logging
import sys

from app.config import settings

# Chatty libraries pinned to WARNING regardless of LOG_LEVEL.
QUIET_LOGGERS = ("uvicorn.access", "urllib3", "sqlalchemy.engine")

# Approve/skip audit lines stay at INFO even when LOG_LEVEL is raised.
AUDIT_LOGGERS = ("app.services.match_lifecycle",)


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = settings.log_level
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: int | str | None = None) -> None:
    """Single stdout handler; each line is tagged with APP_ENV."""
    level = _resolve_level(level)
    env = (settings.app_env or "development").lower()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(f"%(asctime)s [%(levelname)s] [{env}] %(name)s: %(message)s"))
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    for name in AUDIT_LOGGERS:
        logging.getLogger(name).setLevel(min(level, logging.INFO))
