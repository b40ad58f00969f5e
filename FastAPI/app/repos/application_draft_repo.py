from sqlalchemy.orm import Session

from app.core.security import generate_id
from app.models.application_draft import ApplicationDraft


def get_by_match(db: Session, job_match_id: str) -> ApplicationDraft | None:
    return (
        db.query(ApplicationDraft)
        .filter(ApplicationDraft.job_match_id == job_match_id)
        .first()
    )


def stage_upsert(
    db: Session,
    job_match_id: str,
    cover_letter: str,
    answers: dict[str, str],
) -> ApplicationDraft:
    """
    Update the match's draft in place, or add one bound to the match.
    Flushes but does not commit; tailoring_notes are left untouched.
    """
    draft = get_by_match(db, job_match_id)
    if draft is None:
        draft = ApplicationDraft(id=generate_id(), job_match_id=job_match_id)
        db.add(draft)
    draft.cover_letter = cover_letter
    draft.answers_json = dict(answers)
    db.flush()
    return draft
