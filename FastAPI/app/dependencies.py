import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.errors import NotAuthenticated
from app.core.security import decode_access_token
from app.database import get_db
from app.repos.match_store import MatchStore, SqlMatchStore
from app.services.match_lifecycle import MatchLifecycleController

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    if not credentials or not credentials.credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise NotAuthenticated("Not authenticated")
    return credentials.credentials


def get_current_user_id(token: str = Depends(get_access_token)) -> str:
    user_id = decode_access_token(token)
    if not user_id:
        logger.info("Auth failed: invalid or expired token")
        raise NotAuthenticated("Invalid or expired token")
    return user_id


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """User id when a valid token is present, else None. For pages that also render logged out."""
    if not credentials or not credentials.credentials:
        return None
    return decode_access_token(credentials.credentials)


def get_match_store(db: Session = Depends(get_db)) -> MatchStore:
    return SqlMatchStore(db)


def get_lifecycle_controller(
    store: MatchStore = Depends(get_match_store),
) -> MatchLifecycleController:
    return MatchLifecycleController(store)
