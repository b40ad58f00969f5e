from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.status import MatchStatus
from app.models.job_match import JobMatch


def get_match_for_user(db: Session, match_id: str, user_id: str) -> JobMatch | None:
    return (
        db.query(JobMatch)
        .options(joinedload(JobMatch.job_post))
        .filter(JobMatch.id == match_id, JobMatch.user_id == user_id)
        .first()
    )


def lock_match_for_user(db: Session, match_id: str, user_id: str) -> JobMatch | None:
    """SELECT ... FOR UPDATE on the match row; held until the caller commits or rolls back."""
    return (
        db.query(JobMatch)
        .filter(JobMatch.id == match_id, JobMatch.user_id == user_id)
        .with_for_update()
        .first()
    )


def get_matches_for_user(
    db: Session,
    user_id: str,
    statuses: list[str] | None = None,
) -> list[JobMatch]:
    """Every match in the given statuses; the inbox is never truncated."""
    q = (
        db.query(JobMatch)
        .options(joinedload(JobMatch.job_post))
        .filter(JobMatch.user_id == user_id)
    )
    if statuses:
        q = q.filter(JobMatch.status.in_(statuses))
    return q.order_by(JobMatch.fit_score.desc().nulls_last(), JobMatch.created_at.asc()).all()


def get_latest_created_at(db: Session, user_id: str) -> datetime | None:
    return (
        db.query(func.max(JobMatch.created_at))
        .filter(JobMatch.user_id == user_id)
        .scalar()
    )


def mark_applied(match: JobMatch) -> JobMatch:
    """Flip status in the current transaction; the caller commits."""
    match.status = MatchStatus.APPLIED.value
    match.applied_at = datetime.now(timezone.utc)
    return match


def mark_skipped(match: JobMatch, reason: str | None) -> JobMatch:
    match.status = MatchStatus.SKIPPED.value
    match.skip_reason = reason
    match.skipped_at = datetime.now(timezone.utc)
    return match
