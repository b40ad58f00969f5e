from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, JSONType


class JobPost(Base):
    """Collected job posting. Written by the pipeline, read-only here."""

    __tablename__ = "job_posts"

    id = Column(String, primary_key=True, index=True)
    title = Column(String)
    company = Column(String)
    location = Column(String)
    description = Column(Text)
    url = Column(String)
    source = Column(String)
    extra_data = Column(JSONType)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    matches = relationship("JobMatch", back_populates="job_post")
