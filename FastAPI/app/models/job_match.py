from sqlalchemy import CheckConstraint, Column, String, Float, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.status import MatchStatus
from app.database import Base, JSONType

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in MatchStatus)


class JobMatch(Base):
    """One user's match against one job post, with the pipeline's fit score."""

    __tablename__ = "job_matches"
    __table_args__ = (
        UniqueConstraint("user_id", "job_post_id", name="job_matches_user_post_unique"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="job_matches_status_check"),
    )

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    job_post_id = Column(String, ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False)
    fit_score = Column(Float)  # 0-100, set once by the scoring step
    reasons = Column(JSONType)
    status = Column(String, nullable=False, default=MatchStatus.DRAFTED.value)
    skip_reason = Column(Text)
    applied_at = Column(DateTime(timezone=True))
    skipped_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job_post = relationship("JobPost", back_populates="matches")
    draft = relationship("ApplicationDraft", back_populates="job_match", uselist=False)
    submission = relationship("SubmissionEvent", back_populates="job_match", uselist=False)
