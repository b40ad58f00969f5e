"""
Seed a local database with a few job posts and matches for one user, and print
a bearer token for that user. Development only; production matches are written
by the external pipeline.

Usage: python -m app.scripts.seed_demo <user_id>
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from app.core.security import create_access_token, generate_id
from app.core.status import MatchStatus
from app.database import SessionLocal, ensure_tables_exist
from app.models import ApplicationDraft, JobMatch, JobPost

DEMO_JOBS = [
    ("Backend Engineer", "Acme", "Remote", 91.0, MatchStatus.DRAFTED, []),
    ("Platform Engineer", "Globex", "Berlin", 84.0, MatchStatus.NEEDS_REVIEW, ["Cover letter mentions a skill not on the resume"]),
    ("Data Engineer", "Initech", "Austin, TX", None, MatchStatus.DRAFTED, []),
]


def seed(db, user_id: str) -> int:
    created = 0
    for title, company, location, score, status, issues in DEMO_JOBS:
        post = JobPost(
            id=generate_id(),
            title=title,
            company=company,
            location=location,
            description=f"{company} is hiring a {title}.",
            url=f"https://jobs.example.com/{company.lower()}",
            source="demo",
        )
        match = JobMatch(
            id=generate_id(),
            user_id=user_id,
            job_post_id=post.id,
            fit_score=score,
            reasons={"overall": "Demo match", "strengths": ["Python"], "gaps": []},
            status=status.value,
        )
        draft = ApplicationDraft(
            id=generate_id(),
            job_match_id=match.id,
            cover_letter=f"Dear {company} team,\n\nI would like to apply for the {title} role.",
            answers_json={"Why do you want to work here?": f"{company} builds things I use."},
            tailoring_notes={"confidence": 0.8, "issues": issues, "prompt_name": "demo"},
        )
        db.add_all([post, match, draft])
        created += 1
    db.commit()
    return created


def main():
    if len(sys.argv) != 2:
        print("Usage: python -m app.scripts.seed_demo <user_id>")
        sys.exit(1)
    user_id = sys.argv[1]
    ensure_tables_exist()
    db = SessionLocal()
    try:
        n = seed(db, user_id)
    finally:
        db.close()
    print(f"Seeded {n} matches for {user_id}.")
    print(f"Bearer token: {create_access_token(user_id, expires_minutes=60 * 24)}")


if __name__ == "__main__":
    main()
