from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

from app.config import settings


def create_access_token(subject: str, expires_minutes: int = 60) -> str:
    """Issue a bearer token for `subject`. Used by scripts and tests; sign-in itself is external."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> str | None:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"verify_aud": False},
        )
        return payload.get("sub")
    except JWTError:
        return None


def generate_id() -> str:
    return str(uuid4())
