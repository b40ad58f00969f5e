from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.database import Base, JSONType


class Preferences(Base):
    __tablename__ = "preferences"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, unique=True, nullable=False, index=True)
    roles = Column(JSONType)  # list[str]
    locations = Column(JSONType)  # list[str]
    remote_ok = Column(Boolean, default=True)
    min_salary = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
