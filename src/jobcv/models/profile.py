"""Pydantic models for the user profile submitted with each search."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

_LIST_FIELDS = {"experience", "education", "skills"}


class _ProfileModel(BaseModel):
    # The UI sends camelCase keys (startDate, endDate)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value, info: ValidationInfo):
        # Browser clients send null for fields left blank
        if value is not None:
            return value
        return [] if info.field_name in _LIST_FIELDS else ""


class Experience(_ProfileModel):
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class Education(_ProfileModel):
    school: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""


class Profile(_ProfileModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    summary: str = ""
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _unique_skills(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        seen: list[str] = []
        for skill in value:
            skill = str(skill).strip()
            if skill and skill not in seen:
                seen.append(skill)
        return seen
