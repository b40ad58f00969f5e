from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.core.status import MatchStatus

DEFAULT_SKIP_REASON = "User skipped from draft review"


class FitReasons(BaseModel):
    """Per-category sub-scores plus strengths/gaps written by the scoring step."""

    skills_match: float | None = None
    location_match: float | None = None
    experience_match: float | None = None
    overall: str | None = None
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)

    class Config:
        extra = "allow"


class TailoringNotes(BaseModel):
    generated_at: str | None = None
    confidence: float | None = None
    issues: list[str] = Field(default_factory=list)
    prompt_name: str | None = None

    class Config:
        extra = "allow"


def _object_or_none(value: Any) -> Any:
    # Stored JSON that is null, a list or a scalar is treated as absent.
    if value is None or isinstance(value, BaseModel):
        return value
    return value if isinstance(value, dict) else None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


class JobPostView(BaseModel):
    id: str
    title: str | None = None
    company: str | None = None
    location: str | None = None
    description: str | None = None
    url: str | None = None


class JobMatchView(BaseModel):
    id: str
    user_id: str
    job_post_id: str
    fit_score: float | None = None
    reasons: FitReasons | None = None
    status: MatchStatus
    skip_reason: str | None = None
    created_at: datetime | None = None
    applied_at: datetime | None = None
    job_post: JobPostView | None = None

    @field_validator("reasons", mode="before")
    @classmethod
    def reasons_object(cls, v):
        v = _object_or_none(v)
        if isinstance(v, dict):
            v = dict(v)
            for key in ("strengths", "gaps"):
                if key in v:
                    v[key] = _string_list(v[key])
        return v


class ApplicationDraftView(BaseModel):
    id: str
    job_match_id: str
    cover_letter: str = ""
    answers: dict[str, str] = Field(default_factory=dict)
    tailoring_notes: TailoringNotes | None = None

    @field_validator("cover_letter", mode="before")
    @classmethod
    def cover_letter_text(cls, v):
        return "" if v is None else v

    @field_validator("answers", mode="before")
    @classmethod
    def answers_mapping(cls, v):
        if not isinstance(v, dict):
            return {}
        return {str(k): "" if a is None else str(a) for k, a in v.items()}

    @field_validator("tailoring_notes", mode="before")
    @classmethod
    def notes_object(cls, v):
        v = _object_or_none(v)
        if isinstance(v, dict) and "issues" in v:
            v = {**v, "issues": _string_list(v["issues"])}
        return v

    @property
    def issues(self) -> list[str]:
        return list(self.tailoring_notes.issues) if self.tailoring_notes else []


class MatchDetail(BaseModel):
    match: JobMatchView
    job: JobPostView | None = None
    draft: ApplicationDraftView | None = None
    needs_review: bool = False
    issues: list[str] = Field(default_factory=list)


class DraftEdit(BaseModel):
    cover_letter: str = ""
    answers: dict[str, str] = Field(default_factory=dict)


class ApproveRequest(BaseModel):
    match_id: str = Field(alias="matchId", min_length=1)
    cover_letter: str = Field(default="", alias="coverLetter")
    answers: dict[str, str] = Field(default_factory=dict, alias="answersJson")

    class Config:
        populate_by_name = True


class SkipRequest(BaseModel):
    match_id: str = Field(alias="matchId", min_length=1)
    reason: str = Field(default=DEFAULT_SKIP_REASON, max_length=1000)

    class Config:
        populate_by_name = True


class OnboardingStatus(BaseModel):
    complete: bool
    missing: list[str] = Field(default_factory=list)


class InboxResponse(BaseModel):
    matches: list[JobMatchView]
    needs_review_count: int = 0
    last_run: datetime | None = None
    onboarding: OnboardingStatus
