"""Models for generation requests and per-job results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from jobcv.models.job import JobPosting


class Language(str, Enum):
    ENGLISH = "english"
    POLISH = "polish"


class PromptStrategy(str, Enum):
    CUSTOMIZE = "customize"  # keep the base template's exact format
    SYNTHESIZE = "synthesize"  # free-form CV built from a profile


class TemplateSource(str, Enum):
    CUSTOM = "custom"
    STORED = "stored"
    PROFILE = "profile"
    BUILTIN = "builtin"


class GenerationRequest(BaseModel):
    """Everything the prompt builder needs for one job. Transient."""

    model_config = ConfigDict(frozen=True)

    job: JobPosting
    language: Language
    base_text: str
    strategy: PromptStrategy
    source: TemplateSource


class CVResult(BaseModel):
    """A successfully generated CV. Serialized flat, job fields first."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    company: str | None = None
    location: str | None = None
    snippet: str | None = None
    salary: str | None = None
    link: str | None = None
    cv: str
    cv_txt: str
    cv_filename: str
    language: Language
    rendered: bool = True

    @classmethod
    def from_job(cls, job: JobPosting, **fields) -> "CVResult":
        return cls(**job.model_dump(), **fields)
