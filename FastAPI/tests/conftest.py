import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.errors import InvalidTransition, NotFound, RemoteUnavailable
from app.core.mutation_guard import MatchMutationGuard
from app.core.rate_limiter import rate_limiter
from app.core.status import MatchStatus, is_terminal
from app.database import get_db
from app.dependencies import get_access_token, get_current_user_id, get_match_store
from app.main import app
from app.schemas.match import ApplicationDraftView, JobMatchView, JobPostView
from app.services.match_lifecycle import EditLimits, MatchLifecycleController

BASE_TIME = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)


class InMemoryMatchStore:
    """MatchStore fake. Approve/skip stage every write and apply them together."""

    def __init__(self):
        self.matches: dict[str, dict] = {}
        self.posts: dict[str, dict] = {}
        self.drafts: dict[str, dict] = {}
        self.submission_events: list[dict] = []
        self.resumes: set[str] = set()
        self.preferences: dict[str, list[str]] = {}
        self.fail_next_commit = False
        self.fail_after_commit = False
        self._seq = 0

    def add_match(
        self,
        match_id,
        *,
        user_id="user-1",
        fit_score=80.0,
        status=MatchStatus.DRAFTED,
        created_offset_minutes=None,
        reasons=None,
        draft=None,
        title="Backend Engineer",
    ):
        self._seq += 1
        offset = self._seq if created_offset_minutes is None else created_offset_minutes
        post_id = f"post-{match_id}"
        self.posts[post_id] = {"id": post_id, "title": title, "company": "Acme", "location": "Remote",
                               "description": "Build APIs", "url": f"https://jobs.example.com/{match_id}"}
        self.matches[match_id] = {
            "id": match_id,
            "user_id": user_id,
            "job_post_id": post_id,
            "fit_score": fit_score,
            "reasons": reasons,
            "status": MatchStatus(status).value,
            "skip_reason": None,
            "created_at": BASE_TIME + timedelta(minutes=offset),
            "applied_at": None,
        }
        if draft is not None:
            self.drafts[match_id] = {"id": f"draft-{match_id}", "job_match_id": match_id, **draft}
        return match_id

    def _view(self, row) -> JobMatchView:
        return JobMatchView(**row, job_post=JobPostView(**self.posts[row["job_post_id"]]))

    def _draft_view(self, row) -> ApplicationDraftView:
        return ApplicationDraftView(
            id=row["id"],
            job_match_id=row["job_match_id"],
            cover_letter=row.get("cover_letter"),
            answers=row.get("answers_json"),
            tailoring_notes=row.get("tailoring_notes"),
        )

    def _mutable(self, user_id, match_id):
        row = self.matches.get(match_id)
        if row is None or row["user_id"] != user_id:
            raise NotFound("Job match not found")
        if is_terminal(row["status"]):
            raise InvalidTransition(f"Job match is already {row['status']}")
        return row

    def _commit(self, apply):
        if self.fail_next_commit:
            self.fail_next_commit = False
            raise RemoteUnavailable("simulated failure before commit")
        apply()
        if self.fail_after_commit:
            self.fail_after_commit = False
            raise RemoteUnavailable("simulated failure after commit")

    def _draft_row(self, match_id, cover_letter, answers):
        current = self.drafts.get(match_id) or {"id": f"draft-{match_id}", "job_match_id": match_id}
        return {**current, "cover_letter": cover_letter, "answers_json": dict(answers)}

    def get_match(self, user_id, match_id):
        row = self.matches.get(match_id)
        if row is None or row["user_id"] != user_id:
            return None
        return self._view(row)

    def get_draft(self, match_id):
        row = self.drafts.get(match_id)
        return self._draft_view(row) if row else None

    def save_draft(self, user_id, match_id, cover_letter, answers):
        self._mutable(user_id, match_id)
        staged = self._draft_row(match_id, cover_letter, answers)
        self._commit(lambda: self.drafts.__setitem__(match_id, staged))
        return self._draft_view(self.drafts[match_id])

    def approve(self, user_id, match_id, cover_letter, answers):
        row = self._mutable(user_id, match_id)
        if any(e["job_match_id"] == match_id for e in self.submission_events):
            raise InvalidTransition("Job match already has a submission")
        staged_draft = self._draft_row(match_id, cover_letter, answers)
        event = {"job_match_id": match_id, "user_id": user_id, "cover_letter": cover_letter,
                 "answers_json": dict(answers)}

        def apply():
            self.drafts[match_id] = staged_draft
            self.submission_events.append(event)
            row["status"] = MatchStatus.APPLIED.value
            row["applied_at"] = BASE_TIME

        self._commit(apply)
        return self._view(row)

    def skip(self, user_id, match_id, reason):
        row = self._mutable(user_id, match_id)

        def apply():
            row["status"] = MatchStatus.SKIPPED.value
            row["skip_reason"] = reason

        self._commit(apply)
        return self._view(row)

    def list_matches(self, user_id, statuses=None):
        wanted = {MatchStatus(s).value for s in statuses} if statuses else None
        return [
            self._view(r)
            for r in self.matches.values()
            if r["user_id"] == user_id and (wanted is None or r["status"] in wanted)
        ]

    def latest_match_created_at(self, user_id):
        times = [r["created_at"] for r in self.matches.values() if r["user_id"] == user_id]
        return max(times) if times else None

    def has_resume(self, user_id):
        return user_id in self.resumes

    def preference_roles(self, user_id):
        return self.preferences.get(user_id)


@pytest.fixture
def store() -> InMemoryMatchStore:
    return InMemoryMatchStore()


@pytest.fixture
def guard() -> MatchMutationGuard:
    return MatchMutationGuard()


@pytest.fixture
def controller(store, guard) -> MatchLifecycleController:
    return MatchLifecycleController(store, guard=guard, limits=EditLimits())


@pytest.fixture
def client(store):
    def _db_override():
        yield object()

    rate_limiter.reset()
    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user_id] = lambda: "user-1"
    app.dependency_overrides[get_access_token] = lambda: "token-abc"
    app.dependency_overrides[get_match_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def anon_client():
    rate_limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
