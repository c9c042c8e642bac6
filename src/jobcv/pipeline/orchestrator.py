"""Main pipeline orchestrator - tailors one CV per posting, sequentially."""

from __future__ import annotations

import logging
import re
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from jobcv.clients.job_client import JobSearchClient
from jobcv.clients.llm_client import LLMClient
from jobcv.errors import ConfigurationError
from jobcv.export.pdf_renderer import render_pdf_file
from jobcv.models.cv import CVResult
from jobcv.models.job import JobPosting
from jobcv.models.profile import Profile
from jobcv.pipeline.job_filter import dedupe_and_filter
from jobcv.pipeline.prompts import build_prompt, build_system_prompt
from jobcv.pipeline.template_resolver import TemplateResolver

logger = logging.getLogger(__name__)


class JobStage(str, Enum):
    PENDING = "pending"
    TEMPLATE_RESOLVED = "template_resolved"
    PROMPTED = "prompted"
    GENERATED = "generated"
    PERSISTED = "persisted"
    RENDERED = "rendered"
    FAILED = "failed"


@dataclass(frozen=True)
class StageEvent:
    """Notification sent to the observer on every stage transition."""

    job: JobPosting
    stage: JobStage
    index: int  # 1-based position in the batch
    total: int
    detail: str = ""


@dataclass(frozen=True)
class JobFailure:
    job: JobPosting
    stage: JobStage  # last stage reached before the error
    error: str


@dataclass
class BatchResult:
    """Outcome of one search request."""

    results: list[CVResult] = field(default_factory=list)
    failures: list[JobFailure] = field(default_factory=list)
    total: int = 0
    elapsed_seconds: float = 0.0

    @property
    def count(self) -> int:
        return len(self.results)


def sanitize_filename(text: str) -> str:
    """Lowercase, replace anything outside [a-z0-9-] with '-', cap at 50 chars."""
    return re.sub(r"[^a-z0-9-]", "-", text, flags=re.IGNORECASE).lower()[:50]


def cv_base_name(job: JobPosting, timestamp_ms: int, token: str) -> str:
    """Shared base for the .txt and .pdf files of one result."""
    return f"cv_{sanitize_filename(job.company or job.title or 'job')}_{timestamp_ms}_{token}"


class CVPipeline:
    """Runs resolve -> prompt -> generate -> persist -> render for each job.

    A failing job is logged, recorded in ``BatchResult.failures`` and
    skipped; the batch always continues. Rendering is best-effort: any
    renderer error leaves the job in the results with its text file only.
    """

    def __init__(
        self,
        llm: LLMClient,
        resolver: TemplateResolver,
        output_dir: str | Path,
        *,
        job_client: JobSearchClient | None = None,
        renderer: Callable[[str, Path], object] = render_pdf_file,
        on_stage: Callable[[StageEvent], None] | None = None,
    ):
        self.llm = llm
        self.resolver = resolver
        self.output_dir = Path(output_dir)
        self.job_client = job_client
        self.renderer = renderer
        self.on_stage = on_stage

    def _notify(self, job: JobPosting, stage: JobStage, index: int, total: int, detail: str = "") -> None:
        if self.on_stage:
            self.on_stage(StageEvent(job=job, stage=stage, index=index, total=total, detail=detail))

    async def search_and_generate(
        self,
        query: str,
        location: str | None = None,
        *,
        custom_template: str | None = None,
        template_name: str | None = None,
        profile: Profile | None = None,
    ) -> BatchResult:
        """Fetch postings, dedupe and filter them, then generate a CV for each.

        A named inline template is saved before searching, so it is kept
        even when no posting matches. ConfigurationError and ProviderError
        from the job source propagate.
        """
        if self.job_client is None:
            raise ConfigurationError("No job source client configured")

        self.resolver.save_custom(custom_template, template_name)
        postings = await self.job_client.search(query, location)
        jobs = dedupe_and_filter(postings, query)
        logger.info("Found %d jobs (%d before filtering)", len(jobs), len(postings))
        if not jobs:
            return BatchResult()
        return await self._run_batch(
            jobs,
            custom_template=custom_template,
            template_name=template_name,
            profile=profile,
        )

    async def generate_all(
        self,
        jobs: list[JobPosting],
        *,
        custom_template: str | None = None,
        template_name: str | None = None,
        profile: Profile | None = None,
    ) -> BatchResult:
        """Generate a CV for each of the given postings, in order."""
        self.resolver.save_custom(custom_template, template_name)
        return await self._run_batch(
            jobs,
            custom_template=custom_template,
            template_name=template_name,
            profile=profile,
        )

    async def _run_batch(
        self,
        jobs: list[JobPosting],
        *,
        custom_template: str | None,
        template_name: str | None,
        profile: Profile | None,
    ) -> BatchResult:
        start = time.monotonic()
        batch = BatchResult(total=len(jobs))
        logger.info("Generating CVs for %d jobs", len(jobs))

        for index, job in enumerate(jobs, 1):
            try:
                result = await self._process_job(
                    job,
                    index,
                    batch.total,
                    custom_template=custom_template,
                    template_name=template_name,
                    profile=profile,
                )
            except _JobFailed as failed:
                batch.failures.append(failed.failure)
            else:
                batch.results.append(result)

        batch.elapsed_seconds = time.monotonic() - start
        logger.info(
            "Completed %d of %d jobs in %.1fs",
            batch.count,
            batch.total,
            batch.elapsed_seconds,
        )
        return batch

    async def _process_job(
        self,
        job: JobPosting,
        index: int,
        total: int,
        *,
        custom_template: str | None,
        template_name: str | None,
        profile: Profile | None,
    ) -> CVResult:
        stage = JobStage.PENDING
        self._notify(job, stage, index, total, job.describe())

        try:
            request = self.resolver.resolve(
                job,
                custom_template=custom_template,
                template_name=template_name,
                profile=profile,
            )
            stage = JobStage.TEMPLATE_RESOLVED
            logger.info(
                "Processing: %s (%s, %s)",
                job.describe(),
                request.language.value,
                request.source.value,
            )
            self._notify(job, stage, index, total, request.language.value)

            prompt = build_prompt(request)
            system = build_system_prompt(request.language, request.strategy)
            stage = JobStage.PROMPTED
            self._notify(job, stage, index, total)

            response = await self.llm.generate(prompt, system=system)
            stage = JobStage.GENERATED
            self._notify(job, stage, index, total)

            self.output_dir.mkdir(parents=True, exist_ok=True)
            base = cv_base_name(job, int(time.time() * 1000), secrets.token_hex(3))
            txt_path = self.output_dir / f"{base}.txt"
            txt_path.write_text(response.text, encoding="utf-8")
            stage = JobStage.PERSISTED
            self._notify(job, stage, index, total, txt_path.name)
        except Exception as e:
            logger.warning("Skipping %s due to error: %s", job.describe(), e, exc_info=True)
            self._notify(job, JobStage.FAILED, index, total, str(e))
            raise _JobFailed(JobFailure(job=job, stage=stage, error=str(e))) from e

        pdf_path = self.output_dir / f"{base}.pdf"
        try:
            self.renderer(response.text, pdf_path)
        except Exception as e:
            logger.warning("Rendering failed for %s, keeping text only: %s", job.describe(), e)
            try:
                pdf_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove partial %s", pdf_path.name)
            cv_filename, rendered = txt_path.name, False
        else:
            cv_filename, rendered = pdf_path.name, True
            logger.info("CV saved to: %s and %s", txt_path.name, pdf_path.name)
        self._notify(job, JobStage.RENDERED, index, total, cv_filename)

        return CVResult.from_job(
            job,
            cv=response.text,
            cv_txt=txt_path.name,
            cv_filename=cv_filename,
            language=request.language,
            rendered=rendered,
        )


class _JobFailed(Exception):
    def __init__(self, failure: JobFailure):
        super().__init__(failure.error)
        self.failure = failure
