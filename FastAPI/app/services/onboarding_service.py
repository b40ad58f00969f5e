import logging

from app.repos.match_store import MatchStore
from app.schemas.match import OnboardingStatus

logger = logging.getLogger(__name__)


def get_onboarding_status(store: MatchStore, user_id: str | None) -> OnboardingStatus:
    """
    Profile is complete when a resume is on file and preferences list at least one role.
    Advisory only: approve/skip never re-check it, and the pipeline trigger
    enforces its own rule (see pipeline_client.OnboardingIncomplete).
    """
    if not user_id:
        return OnboardingStatus(complete=False, missing=["auth"])

    missing: list[str] = []
    if not store.has_resume(user_id):
        missing.append("resume")
    roles = store.preference_roles(user_id)
    if not roles:
        missing.append("preferences")

    if missing:
        logger.debug("Onboarding incomplete for user=%s missing=%s", user_id, missing)
    return OnboardingStatus(complete=not missing, missing=missing)
