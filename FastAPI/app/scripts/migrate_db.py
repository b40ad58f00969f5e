import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from sqlalchemy import text

from app.database import engine, init_db

# Idempotent on PostgreSQL; each statement is attempted on its own.
MIGRATIONS = [
    "ALTER TABLE job_matches ADD COLUMN IF NOT EXISTS skip_reason TEXT",
    "ALTER TABLE job_matches ADD COLUMN IF NOT EXISTS applied_at TIMESTAMPTZ",
    "ALTER TABLE job_matches ADD COLUMN IF NOT EXISTS skipped_at TIMESTAMPTZ",
    "UPDATE job_matches SET status = 'DRAFTED' WHERE status IS NULL",
    "ALTER TABLE job_matches ALTER COLUMN status SET NOT NULL",
    "ALTER TABLE job_matches ADD CONSTRAINT job_matches_status_check "
    "CHECK (status IN ('DRAFTED', 'NEEDS_REVIEW', 'APPLIED', 'SUBMITTED', 'SKIPPED'))",
    "ALTER TABLE job_matches ADD CONSTRAINT job_matches_user_post_unique UNIQUE (user_id, job_post_id)",
    "ALTER TABLE application_drafts ADD CONSTRAINT application_drafts_job_match_id_key UNIQUE (job_match_id)",
    "ALTER TABLE submission_events ADD CONSTRAINT submission_events_job_match_id_key UNIQUE (job_match_id)",
    # Resume upsert needs one row per user.
    "ALTER TABLE resumes ADD CONSTRAINT resumes_user_id_unique UNIQUE (user_id)",
    "ALTER TABLE preferences ADD CONSTRAINT preferences_user_id_unique UNIQUE (user_id)",
]


def main():
    init_db()  # Create any missing tables first
    with engine.connect() as conn:
        for sql in MIGRATIONS:
            try:
                conn.execute(text(sql))
                conn.commit()
                print("OK:", sql)
            except Exception as e:
                print("Skip:", e)
                conn.rollback()
    print("Migration done.")


if __name__ == "__main__":
    main()
