import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user_id, get_match_store
from app.repos.match_store import MatchStore, store_call
from app.repos.preferences_repo import get_by_user as get_preferences, upsert as upsert_preferences
from app.repos.resume_repo import get_by_user as get_resume, upsert as upsert_resume
from app.schemas.match import OnboardingStatus
from app.schemas.profile import PreferencesResponse, PreferencesUpsert, ResumeResponse, ResumeUpsert
from app.services.onboarding_service import get_onboarding_status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["profile"])


def _upsert_once_more_on_conflict(db: Session, operation: str, save):
    """Run an upsert; a concurrent first insert on the unique user_id makes the retry an update."""
    with store_call(db, operation):
        try:
            return save()
        except IntegrityError:
            db.rollback()
            logger.info("Concurrent insert during %s; retrying as update", operation)
            return save()


@router.get("/resumes/latest", response_model=ResumeResponse)
def get_latest_resume(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with store_call(db, "get_resume"):
        resume = get_resume(db, user_id)
    if not resume:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No saved resume found")
    return resume


@router.put("/resumes/latest", response_model=ResumeResponse)
def save_resume(
    data: ResumeUpsert,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    resume = _upsert_once_more_on_conflict(
        db,
        "save_resume",
        lambda: upsert_resume(db, user_id, data.parsed_data, file_path=data.file_path),
    )
    logger.info("Resume saved for user %s", user_id)
    return resume


@router.get("/preferences", response_model=PreferencesResponse)
def read_preferences(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with store_call(db, "get_preferences"):
        prefs = get_preferences(db, user_id)
    if not prefs:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No preferences saved")
    return prefs


@router.put("/preferences", response_model=PreferencesResponse)
def save_preferences(
    data: PreferencesUpsert,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    prefs = _upsert_once_more_on_conflict(
        db,
        "save_preferences",
        lambda: upsert_preferences(
            db,
            user_id,
            roles=data.roles,
            locations=data.locations,
            remote_ok=data.remote_ok,
            min_salary=data.min_salary,
        ),
    )
    logger.info("Preferences saved for user %s: roles=%d", user_id, len(data.roles))
    return prefs


@router.get("/onboarding", response_model=OnboardingStatus)
def onboarding_status(
    user_id: str = Depends(get_current_user_id),
    store: MatchStore = Depends(get_match_store),
):
    return get_onboarding_status(store, user_id)
