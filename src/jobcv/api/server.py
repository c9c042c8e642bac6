"""FastAPI surface: job search + CV generation, template CRUD, static CVs."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from jobcv import __version__
from jobcv.clients.job_client import JobSearchClient
from jobcv.clients.llm_client import LLMClient
from jobcv.config import AppConfig, load_config
from jobcv.errors import ValidationError
from jobcv.models.profile import Profile
from jobcv.pipeline.orchestrator import CVPipeline
from jobcv.pipeline.template_resolver import TemplateResolver
from jobcv.storage.kv_store import JsonFileStore, KeyValueStore
from jobcv.templates.loader import list_templates

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    location: str | None = None
    custom_template: str | None = Field(default=None, alias="customTemplate")
    template_name: str | None = Field(default=None, alias="templateName")
    profile: Profile | None = None

    def check(self, has_stored: Callable[[str], bool]) -> None:
        """Require a query plus one CV source: profile, inline or saved template."""
        if not self.query or not self.query.strip():
            raise ValidationError("Query is required")
        if self.profile is not None or self.custom_template:
            return
        if self.template_name:
            if not has_stored(self.template_name):
                raise ValidationError(f"Template not found: {self.template_name}")
            return
        raise ValidationError("Profile is required")


class TemplatePayload(BaseModel):
    name: str | None = None
    content: str | None = None


def _error(status: int, message: str, details: str | None = None) -> JSONResponse:
    content: dict = {"error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status, content=content)


async def _json_body(request: Request) -> dict:
    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def create_app(
    config: AppConfig | None = None,
    *,
    store: KeyValueStore | None = None,
    pipeline_factory: Callable[[TemplateResolver], CVPipeline] | None = None,
) -> FastAPI:
    """Build the app. ``pipeline_factory`` is called once per search request."""
    config = config or load_config()
    cv_dir = config.output.resolved_cv_dir
    cv_dir.mkdir(parents=True, exist_ok=True)
    store = store if store is not None else JsonFileStore(config.output.resolved_templates_path)
    resolver = TemplateResolver(store)

    def default_pipeline(resolver: TemplateResolver) -> CVPipeline:
        job_client = JobSearchClient.from_config(config.jooble)
        return CVPipeline(
            LLMClient.from_config(config.ollama),
            resolver,
            cv_dir,
            job_client=job_client,
        )

    make_pipeline = pipeline_factory or default_pipeline

    app = FastAPI(title="jobcv", version=__version__)
    app.state.config = config
    app.state.store = store

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/search")
    async def search(request: Request):
        try:
            body = SearchRequest.model_validate(await _json_body(request))
            body.check(resolver.has_stored)
        except ValidationError as e:
            logger.warning("Rejected search request: %s", e)
            return _error(400, str(e))
        except PydanticValidationError as e:
            logger.warning("Rejected search request: %s", e)
            return _error(400, f"Invalid request: {e.errors()[0]['msg']}")

        logger.info("Starting job search for %r", body.query)
        try:
            pipeline = make_pipeline(resolver)
            try:
                batch = await pipeline.search_and_generate(
                    body.query.strip(),
                    body.location,
                    custom_template=body.custom_template,
                    template_name=body.template_name,
                    profile=body.profile,
                )
            finally:
                await pipeline.llm.aclose()
        except Exception as e:
            logger.error("Error during /search: %s", e, exc_info=True)
            details = traceback.format_exc() if config.server.debug else None
            return _error(500, str(e), details)

        if not batch.total:
            logger.info("No jobs found")
        return {
            "success": True,
            "count": batch.count,
            "results": [r.model_dump(mode="json") for r in batch.results],
        }

    @app.get("/templates")
    async def get_templates() -> dict:
        return {"success": True, "templates": store.all()}

    @app.get("/templates/builtin")
    async def get_builtin_templates() -> dict:
        return {"success": True, "templates": list_templates()}

    @app.post("/templates")
    async def save_template(request: Request):
        try:
            payload = TemplatePayload.model_validate(await _json_body(request))
        except (ValidationError, PydanticValidationError) as e:
            return _error(400, str(e))
        if not payload.name or not payload.content:
            return _error(400, "Name and content are required")
        store.set(payload.name, payload.content)
        logger.info("Saved template %r", payload.name)
        return {"success": True, "name": payload.name}

    @app.delete("/templates/{name}")
    async def delete_template(name: str):
        if not store.delete(name):
            return _error(404, f"Template not found: {name}")
        logger.info("Deleted template %r", name)
        return {"success": True}

    app.mount("/cvs", StaticFiles(directory=str(cv_dir)), name="cvs")
    return app
