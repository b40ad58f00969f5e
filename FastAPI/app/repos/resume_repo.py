from sqlalchemy.orm import Session

from app.models.resume import Resume
from app.core.security import generate_id


def get_by_user(db: Session, user_id: str) -> Resume | None:
    return db.query(Resume).filter(Resume.user_id == user_id).first()


def exists_for_user(db: Session, user_id: str) -> bool:
    return db.query(Resume.id).filter(Resume.user_id == user_id).first() is not None


def upsert(db: Session, user_id: str, parsed_data: dict, file_path: str | None = None) -> Resume:
    """One resume per user; a new upload replaces the previous one."""
    resume = get_by_user(db, user_id)
    if resume is None:
        resume = Resume(id=generate_id(), user_id=user_id)
        db.add(resume)
    resume.parsed_data = parsed_data
    if file_path is not None:
        resume.file_path = file_path
    db.commit()
    db.refresh(resume)
    return resume
