from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ResumeUpsert(BaseModel):
    parsed_data: dict[str, Any]
    file_path: str | None = Field(default=None, max_length=1024)


class ResumeResponse(BaseModel):
    id: str
    user_id: str
    file_path: str | None = None
    parsed_data: dict[str, Any]
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class PreferencesUpsert(BaseModel):
    roles: list[str] = Field(default_factory=list, max_length=25)
    locations: list[str] = Field(default_factory=list, max_length=25)
    remote_ok: bool = True
    min_salary: int | None = Field(default=None, ge=0)

    @field_validator("roles", "locations")
    @classmethod
    def strip_blank(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]


class PreferencesResponse(BaseModel):
    id: str
    user_id: str
    roles: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    remote_ok: bool = True
    min_salary: int | None = None

    class Config:
        from_attributes = True

    @field_validator("roles", "locations", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []
