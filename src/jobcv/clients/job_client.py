"""Jooble job-listing API wrapper with async support."""

from __future__ import annotations

import logging
import os

import httpx

from jobcv.config import JoobleConfig
from jobcv.errors import ConfigurationError, ProviderError
from jobcv.models.job import JobPosting

logger = logging.getLogger(__name__)

JOOBLE_API_URL = "https://pl.jooble.org/api"


class JobSearchClient:
    """Async Jooble search client. One request per search, no retry."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = JOOBLE_API_URL,
        *,
        timeout: float = 15.0,
        radius: str = "40",
        page: str = "1",
        search_mode: str = "1",
        results_per_page: str = "10",
        http_client: httpx.AsyncClient | None = None,
    ):
        key = api_key or os.environ.get("JOOBLE_API_KEY")
        if not key:
            raise ConfigurationError(
                "Jooble API key required. Set JOOBLE_API_KEY env var or pass api_key."
            )
        self.api_key = key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.radius = radius
        self.page = page
        self.search_mode = search_mode
        self.results_per_page = results_per_page
        self._http_client = http_client
        self._search_count: int = 0

    @classmethod
    def from_config(cls, config: JoobleConfig, **kwargs) -> JobSearchClient:
        return cls(
            config.api_key,
            config.api_url,
            timeout=config.timeout,
            radius=config.radius,
            page=config.page,
            search_mode=config.search_mode,
            results_per_page=config.results_per_page,
            **kwargs,
        )

    def _body(self, query: str, location: str | None) -> dict:
        return {
            "keywords": f'"{query}"',  # exact phrase match
            "location": location or "",
            "radius": self.radius,
            "page": self.page,
            "searchMode": self.search_mode,
            "ResultOnPage": self.results_per_page,
        }

    async def _post(self, body: dict) -> httpx.Response:
        url = f"{self.base_url}/{self.api_key}"
        if self._http_client is not None:
            return await self._http_client.post(url, json=body, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=body)

    async def search(self, query: str, location: str | None = None) -> list[JobPosting]:
        """Search and return the raw posting list in provider order."""
        logger.info("Fetching jobs from Jooble: %r in %r", query, location or "anywhere")
        self._search_count += 1
        try:
            response = await self._post(self._body(query, location))
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Jooble HTTP error: %s", e.response.status_code)
            raise ProviderError(
                f"Failed to fetch jobs from Jooble: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Jooble request failed: %s", e)
            raise ProviderError(f"Failed to fetch jobs from Jooble: {e}") from e

        jobs = data.get("jobs") if isinstance(data, dict) else None
        postings = [JobPosting.model_validate(job) for job in jobs or [] if isinstance(job, dict)]
        logger.info("Jooble returned %d postings", len(postings))
        return postings

    def get_search_count(self) -> int:
        """Return accumulated search count and reset the counter."""
        count = self._search_count
        self._search_count = 0
        return count
