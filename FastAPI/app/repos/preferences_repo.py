from sqlalchemy.orm import Session

from app.models.preferences import Preferences
from app.core.security import generate_id


def get_by_user(db: Session, user_id: str) -> Preferences | None:
    return db.query(Preferences).filter(Preferences.user_id == user_id).first()


def upsert(
    db: Session,
    user_id: str,
    *,
    roles: list[str],
    locations: list[str],
    remote_ok: bool = True,
    min_salary: int | None = None,
) -> Preferences:
    prefs = get_by_user(db, user_id)
    if prefs is None:
        prefs = Preferences(id=generate_id(), user_id=user_id)
        db.add(prefs)
    prefs.roles = list(roles)
    prefs.locations = list(locations)
    prefs.remote_ok = remote_ok
    prefs.min_salary = min_salary
    db.commit()
    db.refresh(prefs)
    return prefs
