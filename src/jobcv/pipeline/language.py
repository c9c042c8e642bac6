"""Heuristic classifier for the language a job posting is written in."""

from __future__ import annotations

import re

from jobcv.models.cv import Language

_POLISH_CHARS = re.compile(r"[ąćęłńóśżźĄĆĘŁŃÓŚŻŹ]")
_POLISH_WORDS = re.compile(
    r"\b(oraz|pracownik|firma|wynagrodzenie|szukamy|zatrudnimy)\b",
    re.IGNORECASE,
)


def detect_language(text: str | None) -> Language:
    """Classify posting text. Anything without a Polish signal is English."""
    if not text:
        return Language.ENGLISH
    if _POLISH_CHARS.search(text) or _POLISH_WORDS.search(text):
        return Language.POLISH
    return Language.ENGLISH
