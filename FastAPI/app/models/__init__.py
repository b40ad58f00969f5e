from app.models.job_post import JobPost
from app.models.job_match import JobMatch
from app.models.application_draft import ApplicationDraft
from app.models.submission_event import SubmissionEvent
from app.models.resume import Resume
from app.models.preferences import Preferences

__all__ = [
    "JobPost",
    "JobMatch",
    "ApplicationDraft",
    "SubmissionEvent",
    "Resume",
    "Preferences",
]
