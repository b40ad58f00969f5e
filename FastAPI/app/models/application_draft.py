from sqlalchemy import JSON, Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, JSONType


class ApplicationDraft(Base):
    __tablename__ = "application_drafts"

    id = Column(String, primary_key=True, index=True)
    job_match_id = Column(
        String,
        ForeignKey("job_matches.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    cover_letter = Column(Text)
    answers_json = Column(JSON)  # plain JSON keeps question order (JSONB would sort keys)
    tailoring_notes = Column(JSONType)  # owned by the drafting step; never overwritten by edits
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job_match = relationship("JobMatch", back_populates="draft")
