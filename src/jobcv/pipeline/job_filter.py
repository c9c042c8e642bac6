"""Deduplicate provider postings and keep the ones relevant to the query."""

from __future__ import annotations

from collections.abc import Iterable

from jobcv.models.job import JobPosting


def dedupe(postings: Iterable[JobPosting]) -> list[JobPosting]:
    """Drop postings whose (title, company) key was already seen. First wins."""
    seen: set[tuple[str, str]] = set()
    unique: list[JobPosting] = []
    for posting in postings:
        if posting.key in seen:
            continue
        seen.add(posting.key)
        unique.append(posting)
    return unique


def matches_query(posting: JobPosting, query: str) -> bool:
    """True if the title or snippet contains the query, case-insensitively."""
    q = query.lower()
    return q in (posting.title or "").lower() or q in (posting.snippet or "").lower()


def dedupe_and_filter(postings: Iterable[JobPosting], query: str) -> list[JobPosting]:
    return [p for p in dedupe(postings) if matches_query(p, query)]
