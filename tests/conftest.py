"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from jobcv.clients.job_client import JobSearchClient
from jobcv.clients.llm_client import LLMClient, LLMResponse
from jobcv.models.job import JobPosting
from jobcv.models.profile import Education, Experience, Profile
from jobcv.pipeline.template_resolver import TemplateResolver
from jobcv.storage.kv_store import MemoryStore


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer .env settings out of the tests."""
    for key in (
        "JOOBLE_API_KEY",
        "OLLAMA_API_URL",
        "OLLAMA_MODEL",
        "OLLAMA_TIMEOUT",
        "JOBCV_OUTPUT_DIR",
        "JOBCV_ENV",
        "PORT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(
        name="Jane Doe",
        email="jane@example.com",
        phone="+48 600 100 200",
        summary="Backend engineer focused on APIs and data pipelines.",
        experience=[
            Experience(
                company="Acme",
                position="Backend Engineer",
                start_date="2021-01",
                end_date="",
                description="Built REST APIs in Python and Go.",
            ),
            Experience(company="Initech", position="Developer", start_date="2018-06", end_date="2020-12"),
        ],
        education=[
            Education(
                school="Warsaw University of Technology",
                degree="MSc",
                field="Computer Science",
                start_date="2013",
                end_date="2018",
            ),
        ],
        skills=["Python", "PostgreSQL", "Docker"],
    )


@pytest.fixture
def english_job() -> JobPosting:
    return JobPosting(
        title="Senior Backend Engineer",
        company="Globex",
        location="Warsaw",
        snippet="We need a backend engineer with Python and PostgreSQL experience.",
        salary="20 000 PLN",
        link="https://jooble.org/desc/1",
    )


@pytest.fixture
def polish_job() -> JobPosting:
    return JobPosting(
        title="Backend Developer",
        company="Firma Krzak",
        location="Kraków",
        snippet="Szukamy programisty backend. Wynagrodzenie zależne od doświadczenia.",
        salary="",
        link="https://jooble.org/desc/2",
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def resolver(memory_store) -> TemplateResolver:
    return TemplateResolver(memory_store)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="JANE DOE\nTailored CV", input_tokens=100, output_tokens=50)
    )
    return client


@pytest.fixture
def mock_job_client() -> JobSearchClient:
    """Create a mock job search client."""
    client = AsyncMock(spec=JobSearchClient)
    client.search = AsyncMock(return_value=[])
    return client
