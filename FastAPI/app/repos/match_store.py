"""
Store interface the match lifecycle controller depends on, and its SQLAlchemy
implementation. The controller only ever sees the boundary views from
app.schemas.match, never ORM rows.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InvalidTransition, LifecycleError, NotFound, RemoteUnavailable
from app.core.status import MatchStatus, is_terminal
from app.repos import application_draft_repo as draft_repo
from app.repos import job_match_repo as match_repo
from app.repos import preferences_repo
from app.repos import resume_repo
from app.repos import submission_event_repo as submission_repo
from app.schemas.match import ApplicationDraftView, JobMatchView, JobPostView

logger = logging.getLogger(__name__)


class MatchStore(Protocol):
    def get_match(self, user_id: str, match_id: str) -> JobMatchView | None: ...

    def get_draft(self, match_id: str) -> ApplicationDraftView | None: ...

    def save_draft(
        self, user_id: str, match_id: str, cover_letter: str, answers: dict[str, str]
    ) -> ApplicationDraftView: ...

    def approve(
        self, user_id: str, match_id: str, cover_letter: str, answers: dict[str, str]
    ) -> JobMatchView: ...

    def skip(self, user_id: str, match_id: str, reason: str | None) -> JobMatchView: ...

    def list_matches(self, user_id: str, statuses: list[MatchStatus] | None = None) -> list[JobMatchView]: ...

    def latest_match_created_at(self, user_id: str) -> datetime | None: ...

    def has_resume(self, user_id: str) -> bool: ...

    def preference_roles(self, user_id: str) -> list[str] | None:
        """Roles from the user's preferences, or None when no preferences exist."""
        ...


def job_post_view(post) -> JobPostView | None:
    if post is None:
        return None
    return JobPostView(
        id=post.id,
        title=post.title,
        company=post.company,
        location=post.location,
        description=post.description,
        url=post.url,
    )


def match_view(m) -> JobMatchView:
    return JobMatchView(
        id=m.id,
        user_id=m.user_id,
        job_post_id=m.job_post_id,
        fit_score=m.fit_score,
        reasons=m.reasons,
        status=m.status or MatchStatus.DRAFTED.value,
        skip_reason=m.skip_reason,
        created_at=m.created_at,
        applied_at=m.applied_at,
        job_post=job_post_view(m.job_post),
    )


def draft_view(d) -> ApplicationDraftView:
    return ApplicationDraftView(
        id=d.id,
        job_match_id=d.job_match_id,
        cover_letter=d.cover_letter,
        answers=d.answers_json,
        tailoring_notes=d.tailoring_notes,
    )


@contextmanager
def store_call(db: Session, operation: str):
    """Roll back on any failure; driver and pool errors surface as RemoteUnavailable."""
    try:
        yield
    except LifecycleError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Store call failed during %s: %s", operation, e)
        raise RemoteUnavailable("The job store is unavailable. Please retry.") from e


class SqlMatchStore:
    def __init__(self, db: Session):
        self.db = db

    def _remote(self, operation: str):
        return store_call(self.db, operation)

    def _lock_mutable(self, user_id: str, match_id: str):
        match = match_repo.lock_match_for_user(self.db, match_id, user_id)
        if match is None:
            raise NotFound("Job match not found")
        if is_terminal(match.status or MatchStatus.DRAFTED.value):
            raise InvalidTransition(f"Job match is already {match.status}")
        return match

    def get_match(self, user_id: str, match_id: str) -> JobMatchView | None:
        with self._remote("get_match"):
            m = match_repo.get_match_for_user(self.db, match_id, user_id)
            return match_view(m) if m else None

    def get_draft(self, match_id: str) -> ApplicationDraftView | None:
        with self._remote("get_draft"):
            d = draft_repo.get_by_match(self.db, match_id)
            return draft_view(d) if d else None

    def save_draft(self, user_id, match_id, cover_letter, answers) -> ApplicationDraftView:
        with self._remote("save_draft"):
            for attempt in (1, 2):
                self._lock_mutable(user_id, match_id)
                try:
                    draft = draft_repo.stage_upsert(self.db, match_id, cover_letter, answers)
                    self.db.commit()
                except IntegrityError:
                    # Another worker inserted the draft first; retry as an update.
                    self.db.rollback()
                    if attempt == 2:
                        raise
                    continue
                self.db.refresh(draft)
                return draft_view(draft)

    def approve(self, user_id, match_id, cover_letter, answers) -> JobMatchView:
        with self._remote("approve"):
            match = self._lock_mutable(user_id, match_id)
            if submission_repo.get_by_match(self.db, match_id) is not None:
                raise InvalidTransition("Job match already has a submission")
            try:
                draft_repo.stage_upsert(self.db, match_id, cover_letter, answers)
                submission_repo.stage_create(self.db, match_id, user_id, cover_letter, answers)
                match_repo.mark_applied(match)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise InvalidTransition("Job match already has a submission") from e
            self.db.refresh(match)
            return match_view(match)

    def skip(self, user_id, match_id, reason) -> JobMatchView:
        with self._remote("skip"):
            match = self._lock_mutable(user_id, match_id)
            match_repo.mark_skipped(match, reason)
            self.db.commit()
            self.db.refresh(match)
            return match_view(match)

    def list_matches(self, user_id, statuses=None) -> list[JobMatchView]:
        with self._remote("list_matches"):
            values = [MatchStatus(s).value for s in statuses] if statuses else None
            return [match_view(m) for m in match_repo.get_matches_for_user(self.db, user_id, values)]

    def latest_match_created_at(self, user_id) -> datetime | None:
        with self._remote("latest_match_created_at"):
            return match_repo.get_latest_created_at(self.db, user_id)

    def has_resume(self, user_id) -> bool:
        with self._remote("has_resume"):
            return resume_repo.exists_for_user(self.db, user_id)

    def preference_roles(self, user_id) -> list[str] | None:
        with self._remote("preference_roles"):
            prefs = preferences_repo.get_by_user(self.db, user_id)
            if prefs is None:
                return None
            return [str(r) for r in (prefs.roles or []) if r]
