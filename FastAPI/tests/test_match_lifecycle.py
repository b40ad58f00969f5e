import pytest

from app.core.errors import (
    InvalidTransition,
    MutationInProgress,
    NotAuthenticated,
    NotFound,
    RemoteUnavailable,
    ValidationFailed,
)
from app.core.status import MatchStatus
from app.schemas.match import DEFAULT_SKIP_REASON
from app.services.match_lifecycle import EditLimits, MatchLifecycleController


@pytest.mark.parametrize("status", [MatchStatus.APPLIED, MatchStatus.SUBMITTED, MatchStatus.SKIPPED])
def test_terminal_match_rejects_every_mutation(store, controller, status):
    store.add_match("m1", status=status, draft={"cover_letter": "original", "answers_json": {}})

    with pytest.raises(InvalidTransition):
        controller.save_edit("user-1", "m1", "new text", {})
    with pytest.raises(InvalidTransition):
        controller.approve("user-1", "m1", "new text", {})
    with pytest.raises(InvalidTransition):
        controller.skip("user-1", "m1", "not interested")

    assert store.drafts["m1"]["cover_letter"] == "original"
    assert store.matches["m1"]["status"] == status.value
    assert store.submission_events == []


def test_save_edit_twice_keeps_one_draft(store, controller):
    store.add_match("m1")
    first = controller.save_edit("user-1", "m1", "Dear team", {"Why us?": "Because"})
    second = controller.save_edit("user-1", "m1", "Dear team", {"Why us?": "Because"})

    assert len(store.drafts) == 1
    assert first.id == second.id
    assert second.cover_letter == "Dear team"
    assert store.matches["m1"]["status"] == "DRAFTED"


def test_save_edit_creates_missing_draft_and_keeps_status(store, controller):
    store.add_match("m1", status=MatchStatus.NEEDS_REVIEW)
    draft = controller.save_edit("user-1", "m1", "Hello", {})

    assert draft.job_match_id == "m1"
    assert store.matches["m1"]["status"] == "NEEDS_REVIEW"


def test_save_edit_preserves_tailoring_notes(store, controller):
    notes = {"confidence": 0.4, "issues": ["Claims Kubernetes experience"], "model": "x"}
    store.add_match("m1", status=MatchStatus.NEEDS_REVIEW,
                    draft={"cover_letter": "a", "answers_json": {}, "tailoring_notes": notes})

    controller.save_edit("user-1", "m1", "b", {})
    detail = controller.load_match("user-1", "m1")

    assert detail.needs_review is True
    assert detail.issues == ["Claims Kubernetes experience"]
    assert detail.draft.tailoring_notes.model_extra == {"model": "x"}


def test_approve_retry_after_failure_before_commit_records_one_event(store, controller):
    store.add_match("m1")
    store.fail_next_commit = True

    with pytest.raises(RemoteUnavailable):
        controller.approve("user-1", "m1", "Final", {"Q": "A"})
    assert store.submission_events == []
    assert store.matches["m1"]["status"] == "DRAFTED"

    match = controller.approve("user-1", "m1", "Final", {"Q": "A"})
    assert match.status == MatchStatus.APPLIED
    assert len(store.submission_events) == 1


def test_approve_retry_after_lost_response_does_not_duplicate(store, controller):
    store.add_match("m1")
    store.fail_after_commit = True

    with pytest.raises(RemoteUnavailable):
        controller.approve("user-1", "m1", "Final", {})
    with pytest.raises(InvalidTransition):
        controller.approve("user-1", "m1", "Final", {})

    assert len(store.submission_events) == 1
    assert store.matches["m1"]["status"] == "APPLIED"


def test_edit_then_approve_stores_edited_text(store, controller):
    store.add_match("m1", draft={"cover_letter": "Pipeline draft", "answers_json": {"Q": "old"}})

    controller.save_edit("user-1", "m1", "My edited letter", {"Q": "new"})
    match = controller.approve("user-1", "m1", "My edited letter", {"Q": "new"})

    assert match.status == MatchStatus.APPLIED
    assert store.drafts["m1"]["cover_letter"] == "My edited letter"
    assert store.drafts["m1"]["answers_json"] == {"Q": "new"}
    assert [e["cover_letter"] for e in store.submission_events] == ["My edited letter"]


def test_approve_persists_unsaved_edit(store, controller):
    store.add_match("m1", draft={"cover_letter": "Pipeline draft", "answers_json": {}})

    controller.approve("user-1", "m1", "Typed but never saved", {})

    assert store.drafts["m1"]["cover_letter"] == "Typed but never saved"


def test_skip_needs_review_leaves_actionable_list(store, controller):
    store.add_match("m1", status=MatchStatus.NEEDS_REVIEW)
    store.add_match("m2")

    match = controller.skip("user-1", "m1", "Too far away")

    assert match.status == MatchStatus.SKIPPED
    assert store.matches["m1"]["skip_reason"] == "Too far away"
    assert [m.id for m in controller.actionable_matches("user-1")] == ["m2"]
    assert store.submission_events == []


def test_skip_blank_reason_uses_default(store, controller):
    store.add_match("m1")
    controller.skip("user-1", "m1", "   ")
    assert store.matches["m1"]["skip_reason"] == DEFAULT_SKIP_REASON


def test_actionable_ordering_scores_desc_ties_oldest_first_nulls_last(store, controller):
    store.add_match("D", fit_score=None, created_offset_minutes=4)
    store.add_match("C", fit_score=70.0, created_offset_minutes=3)
    store.add_match("B", fit_score=90.0, created_offset_minutes=2)
    store.add_match("A", fit_score=90.0, created_offset_minutes=1)
    store.add_match("X", fit_score=99.0, status=MatchStatus.APPLIED, created_offset_minutes=0)

    assert [m.id for m in controller.actionable_matches("user-1")] == ["A", "B", "C", "D"]


def test_load_match_without_draft(store, controller):
    store.add_match("m1", reasons={"skills_match": 80, "strengths": ["Python"], "unknown": 1})
    detail = controller.load_match("user-1", "m1")

    assert detail.draft is None
    assert detail.needs_review is False
    assert detail.job.title == "Backend Engineer"
    assert detail.match.reasons.strengths == ["Python"]


def test_load_match_owned_by_other_user_is_not_found(store, controller):
    store.add_match("m1", user_id="someone-else")
    with pytest.raises(NotFound):
        controller.load_match("user-1", "m1")
    with pytest.raises(NotFound):
        controller.approve("user-1", "m1", "x", {})


def test_mutations_require_user(store, controller):
    store.add_match("m1")
    with pytest.raises(NotAuthenticated):
        controller.approve(None, "m1", "x", {})
    with pytest.raises(NotAuthenticated):
        controller.skip("", "m1")
    assert store.matches["m1"]["status"] == "DRAFTED"


def test_second_concurrent_mutation_is_refused(store, controller, guard):
    store.add_match("m1")
    with guard.hold("user-1", "m1"):
        with pytest.raises(MutationInProgress):
            controller.save_edit("user-1", "m1", "x", {})
    controller.save_edit("user-1", "m1", "x", {})
    assert store.drafts["m1"]["cover_letter"] == "x"


def test_in_flight_match_looks_missing_to_other_users(store, controller, guard):
    store.add_match("m1")
    with guard.hold("user-1", "m1"):
        with pytest.raises(NotFound):
            controller.skip("user-2", "m1", "not mine")
    assert store.matches["m1"]["status"] == "DRAFTED"


def test_validation_limits(store, guard):
    store.add_match("m1")
    ctl = MatchLifecycleController(store, guard=guard, limits=EditLimits(max_cover_letter_chars=10, max_answers=1))

    with pytest.raises(ValidationFailed):
        ctl.save_edit("user-1", "m1", "x" * 11, {})
    with pytest.raises(ValidationFailed):
        ctl.approve("user-1", "m1", "ok", {"Q1": "a", "Q2": "b"})
    with pytest.raises(ValidationFailed):
        ctl.save_edit("user-1", "m1", "ok", {"  ": "blank question"})
    assert "m1" not in store.drafts
    assert store.matches["m1"]["status"] == "DRAFTED"


def test_matches_with_status_returns_history(store, controller):
    store.add_match("m1", status=MatchStatus.APPLIED, fit_score=50.0)
    store.add_match("m2", status=MatchStatus.APPLIED, fit_score=95.0)
    store.add_match("m3")

    assert [m.id for m in controller.matches_with_status("user-1", MatchStatus.APPLIED)] == ["m2", "m1"]
