import logging

from fastapi import APIRouter, Depends

from app.core.status import MatchStatus
from app.dependencies import get_current_user_id, get_lifecycle_controller, get_match_store
from app.repos.match_store import MatchStore
from app.schemas.match import (
    ApplicationDraftView,
    ApproveRequest,
    DraftEdit,
    InboxResponse,
    JobMatchView,
    MatchDetail,
    SkipRequest,
)
from app.services.match_lifecycle import MatchLifecycleController
from app.services.onboarding_service import get_onboarding_status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["matches"])


@router.get("/inbox", response_model=InboxResponse)
def get_inbox(
    user_id: str = Depends(get_current_user_id),
    store: MatchStore = Depends(get_match_store),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    """Actionable matches (DRAFTED / NEEDS_REVIEW), best fit first, plus inbox banners."""
    matches = controller.actionable_matches(user_id)
    needs_review = sum(1 for m in matches if m.status == MatchStatus.NEEDS_REVIEW)
    logger.debug("GET /inbox user=%s count=%d needs_review=%d", user_id, len(matches), needs_review)
    return InboxResponse(
        matches=matches,
        needs_review_count=needs_review,
        last_run=store.latest_match_created_at(user_id),
        onboarding=get_onboarding_status(store, user_id),
    )


@router.get("/matches", response_model=list[JobMatchView])
def list_matches(
    status: MatchStatus | None = None,
    user_id: str = Depends(get_current_user_id),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    """
    Matches in one status (e.g. APPLIED or SKIPPED for history).
    Without a status, same list as the inbox.
    """
    if status is None:
        return controller.actionable_matches(user_id)
    return controller.matches_with_status(user_id, status)


@router.get("/matches/{match_id}", response_model=MatchDetail)
def get_match(
    match_id: str,
    user_id: str = Depends(get_current_user_id),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    return controller.load_match(user_id, match_id)


@router.put("/matches/{match_id}/draft", response_model=ApplicationDraftView)
def save_draft(
    match_id: str,
    body: DraftEdit,
    user_id: str = Depends(get_current_user_id),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    """Save cover letter and answers. Creates the draft if the pipeline did not. Status is unchanged."""
    return controller.save_edit(user_id, match_id, body.cover_letter, body.answers)


@router.post("/approve", response_model=JobMatchView)
def approve(
    body: ApproveRequest,
    user_id: str = Depends(get_current_user_id),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    """Approve with the content currently on screen; marks the match APPLIED."""
    return controller.approve(user_id, body.match_id, body.cover_letter, body.answers)


@router.post("/skip", response_model=JobMatchView)
def skip(
    body: SkipRequest,
    user_id: str = Depends(get_current_user_id),
    controller: MatchLifecycleController = Depends(get_lifecycle_controller),
):
    return controller.skip(user_id, body.match_id, body.reason)
