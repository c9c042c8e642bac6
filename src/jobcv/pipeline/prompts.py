"""Prompt construction for CV tailoring.

Two strategies exist and are not interchangeable:

- ``CUSTOMIZE`` rewrites an existing template and must keep its exact
  format (built-in or user-supplied templates).
- ``SYNTHESIZE`` writes a new, well-formatted CV from profile text.

Labels and instructions are written in the posting's language.
"""

from __future__ import annotations

from dataclasses import dataclass

from jobcv.models.cv import GenerationRequest, Language, PromptStrategy
from jobcv.models.job import JobPosting


@dataclass(frozen=True)
class _Wording:
    job_header: str
    position: str
    company: str
    location: str
    requirements: str
    not_given: str
    no_requirements: str
    customize: str
    customize_header: str
    synthesize: str
    synthesize_header: str
    language_name: str


_WORDING: dict[Language, _Wording] = {
    Language.ENGLISH: _Wording(
        job_header="JOB OFFER",
        position="Position",
        company="Company",
        location="Location",
        requirements="Requirements",
        not_given="Not specified",
        no_requirements="No requirements",
        customize=(
            "Customize the following CV for this job offer. Focus on experience, "
            "skills and projects related to the requirements. Keep exactly the same "
            "format. CV in English."
        ),
        customize_header="CV TO CUSTOMIZE",
        synthesize=(
            "Create a well-formatted CV for this job offer based on the candidate "
            "profile below. Highlight the experience and skills that match the "
            "requirements. Do not invent employers, dates or degrees. CV in English."
        ),
        synthesize_header="CANDIDATE PROFILE",
        language_name="English",
    ),
    Language.POLISH: _Wording(
        job_header="OFERTA PRACY",
        position="Stanowisko",
        company="Firma",
        location="Lokalizacja",
        requirements="Wymagania",
        not_given="Nie podano",
        no_requirements="Brak wymagań",
        customize=(
            "Dostosuj poniższe CV do oferty pracy. Skup się na doświadczeniu, "
            "umiejętnościach i projektach związanych z wymaganiami. Zachowaj "
            "dokładnie ten sam format. CV w języku polskim."
        ),
        customize_header="CV DO DOSTOSOWANIA",
        synthesize=(
            "Stwórz dobrze sformatowane CV dla tej oferty pracy na podstawie "
            "poniższego profilu kandydata. Wyeksponuj doświadczenie i umiejętności "
            "pasujące do wymagań. Nie wymyślaj pracodawców, dat ani dyplomów. "
            "CV w języku polskim."
        ),
        synthesize_header="PROFIL KANDYDATA",
        language_name="Polish",
    ),
}


def wording_for(language: Language) -> _Wording:
    return _WORDING[language]


def _job_block(job: JobPosting, w: _Wording) -> str:
    return (
        f"{w.job_header}:\n"
        f"{w.position}: {job.title or w.not_given}\n"
        f"{w.company}: {job.company or w.not_given}\n"
        f"{w.location}: {job.location or w.not_given}\n"
        f"{w.requirements}: {job.snippet or w.no_requirements}"
    )


def build_prompt(request: GenerationRequest) -> str:
    """Combine job fields and base text into one user message."""
    w = wording_for(request.language)
    if request.strategy is PromptStrategy.CUSTOMIZE:
        instruction, header = w.customize, w.customize_header
    elif request.strategy is PromptStrategy.SYNTHESIZE:
        instruction, header = w.synthesize, w.synthesize_header
    else:
        raise ValueError(f"Unknown prompt strategy: {request.strategy}")

    return f"{instruction}\n\n{_job_block(request.job, w)}\n\n{header}:\n{request.base_text}"


def build_system_prompt(language: Language, strategy: PromptStrategy) -> str:
    """System message fixing persona, output language and format rules."""
    name = wording_for(language).language_name
    if strategy is PromptStrategy.CUSTOMIZE:
        return (
            "You are a professional CV customizer. Modify ONLY existing sections. "
            f"Keep the exact same format. CV in {name}"
        )
    if strategy is PromptStrategy.SYNTHESIZE:
        return (
            "You are a professional CV writer. Produce a complete, well-formatted "
            "plain-text CV using only facts from the candidate profile. "
            f"CV in {name}"
        )
    raise ValueError(f"Unknown prompt strategy: {strategy}")
