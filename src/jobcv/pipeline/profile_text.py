"""Render a Profile as the flat plain-text CV fed to the generator."""

from __future__ import annotations

from jobcv.models.profile import Education, Experience, Profile

NOT_SPECIFIED = "Not specified"

SECTION_HEADERS = ("SUMMARY", "WORK EXPERIENCE", "EDUCATION", "SKILLS")


def _or(value: str, placeholder: str) -> str:
    value = (value or "").strip()
    return value or placeholder


def _date_range(start: str, end: str) -> str:
    return f"{_or(start, NOT_SPECIFIED)} - {_or(end, 'Present')}"


def _experience_lines(entry: Experience) -> list[str]:
    lines = [
        f"{_or(entry.position, 'Position')} at {_or(entry.company, 'Company')}",
        _date_range(entry.start_date, entry.end_date),
    ]
    if entry.description.strip():
        lines.append(entry.description.strip())
    return lines


def _education_lines(entry: Education) -> list[str]:
    return [
        f"{_or(entry.degree, 'Degree')} in {_or(entry.field, 'Field')} "
        f"at {_or(entry.school, 'School')}",
        _date_range(entry.start_date, entry.end_date),
    ]


def profile_to_text(profile: Profile) -> str:
    """Deterministic and total: every profile yields all four sections in order."""
    summary, experience, education, skills = SECTION_HEADERS
    lines = [
        _or(profile.name, "Your Name"),
        f"Email: {_or(profile.email, NOT_SPECIFIED)} | Phone: {_or(profile.phone, NOT_SPECIFIED)}",
        "",
        summary,
        _or(profile.summary, NOT_SPECIFIED),
        "",
        experience,
    ]

    if profile.experience:
        for i, entry in enumerate(profile.experience):
            if i:
                lines.append("")
            lines.extend(_experience_lines(entry))
    else:
        lines.append(NOT_SPECIFIED)

    lines += ["", education]
    if profile.education:
        for i, entry in enumerate(profile.education):
            if i:
                lines.append("")
            lines.extend(_education_lines(entry))
    else:
        lines.append(NOT_SPECIFIED)

    lines += ["", skills, ", ".join(profile.skills) or NOT_SPECIFIED]
    return "\n".join(lines)
