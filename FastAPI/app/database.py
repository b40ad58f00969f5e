import logging

from sqlalchemy import JSON, create_engine, inspect
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import settings

logger = logging.getLogger(__name__)

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("postgresql"):
        return {
            "connect_timeout": int(settings.remote_timeout_seconds),
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        }
    return {}


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from app.models import (  # noqa: F401
        JobPost,
        JobMatch,
        ApplicationDraft,
        SubmissionEvent,
        Resume,
        Preferences,
    )

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized")
    except Exception as e:
        logger.exception("Database initialization failed: %s", e)
        raise


def ensure_tables_exist() -> list[str]:
    """Create any missing tables without touching existing data. Returns the names created."""
    from app.models import (  # noqa: F401
        JobPost,
        JobMatch,
        ApplicationDraft,
        SubmissionEvent,
        Resume,
        Preferences,
    )

    try:
        inspector = inspect(engine)
        existing_tables = set(inspector.get_table_names())

        # SQLAlchemy create_all only creates missing tables, never drops existing ones.
        Base.metadata.create_all(bind=engine)
        target_tables = set(Base.metadata.tables.keys())
        created_tables = sorted(target_tables - existing_tables)

        if created_tables:
            logger.info("Created missing DB tables: %s", ", ".join(created_tables))
        else:
            logger.info("All DB tables already exist; no schema changes applied.")
        return created_tables
    except Exception as e:
        logger.exception("Ensure tables failed: %s", e)
        raise
