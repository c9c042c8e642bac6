"""Data models for the job search and CV generation pipeline."""

from jobcv.models.cv import (
    CVResult,
    GenerationRequest,
    Language,
    PromptStrategy,
    TemplateSource,
)
from jobcv.models.job import JobPosting
from jobcv.models.profile import Education, Experience, Profile

__all__ = [
    "CVResult",
    "Education",
    "Experience",
    "GenerationRequest",
    "JobPosting",
    "Language",
    "Profile",
    "PromptStrategy",
    "TemplateSource",
]
