"""
Match lifecycle controller: the only place user-driven transitions happen.

    DRAFTED / NEEDS_REVIEW --approve--> APPLIED
    DRAFTED / NEEDS_REVIEW --skip-----> SKIPPED
    DRAFTED / NEEDS_REVIEW --save-----> (unchanged)

The initial DRAFTED vs NEEDS_REVIEW status is written by the external pipeline
(NEEDS_REVIEW when the drafting step flagged tailoring issues). APPLIED,
SUBMITTED and SKIPPED are terminal: every mutation on them raises
InvalidTransition. The store re-checks status under a row lock, so the check
here is a fast path, not the guarantee.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from app.config import settings
from app.core.errors import InvalidTransition, NotAuthenticated, NotFound, ValidationFailed
from app.core.mutation_guard import MatchMutationGuard, mutation_guard
from app.core.status import ACTIONABLE_STATUSES, MatchStatus, is_terminal
from app.repos.match_store import MatchStore
from app.schemas.match import (
    DEFAULT_SKIP_REASON,
    ApplicationDraftView,
    JobMatchView,
    MatchDetail,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditLimits:
    max_cover_letter_chars: int = 20_000
    max_answers: int = 50
    max_question_chars: int = 1_000
    max_answer_chars: int = 5_000

    @classmethod
    def from_settings(cls) -> "EditLimits":
        return cls(
            max_cover_letter_chars=settings.max_cover_letter_chars,
            max_answers=settings.max_answers,
            max_question_chars=settings.max_question_chars,
            max_answer_chars=settings.max_answer_chars,
        )


def validate_edit(cover_letter: str, answers: dict[str, str], limits: EditLimits) -> None:
    if not isinstance(cover_letter, str):
        raise ValidationFailed("Cover letter must be text")
    if len(cover_letter) > limits.max_cover_letter_chars:
        raise ValidationFailed(f"Cover letter exceeds {limits.max_cover_letter_chars} characters")
    if not isinstance(answers, dict):
        raise ValidationFailed("Answers must be a mapping of question to answer")
    if len(answers) > limits.max_answers:
        raise ValidationFailed(f"At most {limits.max_answers} answers are allowed")
    for question, answer in answers.items():
        if not isinstance(question, str) or not question.strip():
            raise ValidationFailed("Every answer needs a non-empty question")
        if not isinstance(answer, str):
            raise ValidationFailed(f"Answer to {question[:60]!r} must be text")
        if len(question) > limits.max_question_chars:
            raise ValidationFailed(f"Question exceeds {limits.max_question_chars} characters")
        if len(answer) > limits.max_answer_chars:
            raise ValidationFailed(f"Answer to {question[:60]!r} exceeds {limits.max_answer_chars} characters")


def _created_key(created_at: datetime | None) -> tuple:
    if created_at is None:
        return (1, 0.0)
    # Mixed naive/aware values come back from different drivers; compare as POSIX seconds.
    return (0, created_at.timestamp())


def order_matches(matches: list[JobMatchView]) -> list[JobMatchView]:
    """Fit score descending with nulls last; equal scores keep oldest-created first."""
    return sorted(
        matches,
        key=lambda m: (m.fit_score is None, -(m.fit_score or 0.0), _created_key(m.created_at)),
    )


def actionable(matches: list[JobMatchView]) -> list[JobMatchView]:
    return order_matches([m for m in matches if m.status in ACTIONABLE_STATUSES])


class MatchLifecycleController:
    def __init__(
        self,
        store: MatchStore,
        guard: MatchMutationGuard = mutation_guard,
        limits: EditLimits | None = None,
    ):
        self.store = store
        self.guard = guard
        self.limits = limits or EditLimits.from_settings()

    @staticmethod
    def _require_user(user_id: str | None) -> str:
        if not user_id:
            raise NotAuthenticated("Not authenticated")
        return user_id

    def _mutable_match(self, user_id: str, match_id: str) -> JobMatchView:
        match = self.store.get_match(user_id, match_id)
        if match is None:
            raise NotFound("Job match not found")
        if is_terminal(match.status):
            logger.info(
                "Refused mutation on terminal match: user=%s match=%s status=%s",
                user_id, match_id, match.status.value,
            )
            raise InvalidTransition(f"Job match is already {match.status.value}")
        return match

    def load_match(self, user_id: str | None, match_id: str) -> MatchDetail:
        user_id = self._require_user(user_id)
        match = self.store.get_match(user_id, match_id)
        if match is None:
            raise NotFound("Job match not found")
        draft = self.store.get_draft(match_id)
        issues = draft.issues if draft else []
        return MatchDetail(
            match=match,
            job=match.job_post,
            draft=draft,
            needs_review=match.status == MatchStatus.NEEDS_REVIEW or bool(issues),
            issues=issues,
        )

    def save_edit(
        self,
        user_id: str | None,
        match_id: str,
        cover_letter: str,
        answers: dict[str, str],
    ) -> ApplicationDraftView:
        user_id = self._require_user(user_id)
        validate_edit(cover_letter, answers, self.limits)
        with self.guard.hold(user_id, match_id):
            self._mutable_match(user_id, match_id)
            draft = self.store.save_draft(user_id, match_id, cover_letter, answers)
        logger.info("Draft saved: user=%s match=%s answers=%d", user_id, match_id, len(answers))
        return draft

    def approve(
        self,
        user_id: str | None,
        match_id: str,
        cover_letter: str,
        answers: dict[str, str],
    ) -> JobMatchView:
        """Persist the final content, record the submission, and flip to APPLIED in one store transaction."""
        user_id = self._require_user(user_id)
        validate_edit(cover_letter, answers, self.limits)
        with self.guard.hold(user_id, match_id):
            self._mutable_match(user_id, match_id)
            match = self.store.approve(user_id, match_id, cover_letter, answers)
        logger.info("Match approved: user=%s match=%s status=%s", user_id, match_id, match.status.value)
        return match

    def skip(self, user_id: str | None, match_id: str, reason: str | None = DEFAULT_SKIP_REASON) -> JobMatchView:
        user_id = self._require_user(user_id)
        reason = (reason or "").strip() or DEFAULT_SKIP_REASON
        with self.guard.hold(user_id, match_id):
            self._mutable_match(user_id, match_id)
            match = self.store.skip(user_id, match_id, reason)
        logger.info("Match skipped: user=%s match=%s reason=%r", user_id, match_id, reason)
        return match

    def actionable_matches(self, user_id: str | None) -> list[JobMatchView]:
        user_id = self._require_user(user_id)
        return actionable(self.store.list_matches(user_id, sorted(ACTIONABLE_STATUSES)))

    def matches_with_status(self, user_id: str | None, status: MatchStatus) -> list[JobMatchView]:
        user_id = self._require_user(user_id)
        return order_matches(self.store.list_matches(user_id, [status]))
