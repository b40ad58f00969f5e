from sqlalchemy.orm import Session

from app.core.security import generate_id
from app.models.submission_event import SubmissionEvent


def get_by_match(db: Session, job_match_id: str) -> SubmissionEvent | None:
    return (
        db.query(SubmissionEvent)
        .filter(SubmissionEvent.job_match_id == job_match_id)
        .first()
    )


def stage_create(
    db: Session,
    job_match_id: str,
    user_id: str,
    cover_letter: str,
    answers: dict[str, str],
) -> SubmissionEvent:
    """Add the snapshot to the current transaction. The unique job_match_id rejects a second one."""
    event = SubmissionEvent(
        id=generate_id(),
        job_match_id=job_match_id,
        user_id=user_id,
        cover_letter=cover_letter,
        answers_json=dict(answers),
    )
    db.add(event)
    db.flush()
    return event
