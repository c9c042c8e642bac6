"""Exception taxonomy shared by the clients, the pipeline and the API."""

from __future__ import annotations


class JobCVError(Exception):
    """Base class for every error raised by jobcv."""


class ConfigurationError(JobCVError):
    """A required setting (e.g. the job board API key) is missing or invalid."""


class ProviderError(JobCVError):
    """The job-listing provider call failed. Not retried."""


class GenerationError(JobCVError):
    """The generation backend failed after exhausting its retries."""


class RenderError(JobCVError):
    """The document renderer could not produce a file."""


class ValidationError(JobCVError):
    """A request is missing required fields."""
