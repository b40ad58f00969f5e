from sqlalchemy import JSON, Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class SubmissionEvent(Base):
    """Write-once snapshot of the approved content. Unique per match."""

    __tablename__ = "submission_events"

    id = Column(String, primary_key=True, index=True)
    job_match_id = Column(
        String,
        ForeignKey("job_matches.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    user_id = Column(String, nullable=False)
    cover_letter = Column(Text)
    answers_json = Column(JSON)  # plain JSON keeps question order (JSONB would sort keys)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    job_match = relationship("JobMatch", back_populates="submission")
