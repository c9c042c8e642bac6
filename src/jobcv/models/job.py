"""Pydantic models for job postings returned by the job board."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class JobPosting(BaseModel):
    """One listing from the provider. Immutable once fetched."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str | None = None
    company: str | None = None
    location: str | None = None
    snippet: str | None = None
    salary: str | None = None
    link: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for deduplication."""
        return (self.title or "", self.company or "")

    def describe(self) -> str:
        return f"{self.title or '?'} at {self.company or '?'}"
