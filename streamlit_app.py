"""Streamlit Web UI for jobcv.

Submits a job query plus profile (or custom template) to the HTTP API and
lists the generated CVs with download links. Profile and custom templates
are persisted locally between sessions.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import httpx
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from jobcv.models.profile import Education, Experience, Profile
from jobcv.storage.kv_store import JsonFileStore

logger = logging.getLogger(__name__)

API_URL = os.environ.get("JOBCV_API_URL", "http://localhost:3000").rstrip("/")
STATE_PATH = Path(os.environ.get("JOBCV_UI_STATE", "~/.jobcv/ui_state.json")).expanduser()
TECH_CHOICES = ["Node.js", "React", "Python", "C++"]
TEMPLATE_PREFIX = "template:"

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="CV Generator",
    page_icon=":page_facing_up:",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Local persistence
# ---------------------------------------------------------------------------


@st.cache_resource
def _get_store() -> JsonFileStore:
    return JsonFileStore(STATE_PATH)


def _load_profile() -> Profile:
    raw = _get_store().get("profile")
    if not raw:
        return Profile()
    try:
        return Profile.model_validate_json(raw)
    except ValueError:
        logger.warning("Stored profile is invalid, starting empty")
        return Profile()


def _save_profile(profile: Profile) -> None:
    _get_store().set("profile", profile.model_dump_json(by_alias=True))


def _load_templates() -> dict[str, str]:
    return {
        key[len(TEMPLATE_PREFIX):]: value
        for key, value in _get_store().all().items()
        if key.startswith(TEMPLATE_PREFIX)
    }


if "profile" not in st.session_state:
    st.session_state.profile = _load_profile()
if "results" not in st.session_state:
    st.session_state.results = []

# ---------------------------------------------------------------------------
# Sidebar: profile editor
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("CV Generator")
    st.caption("Tailor a CV to every matching job offer")

    profile: Profile = st.session_state.profile
    st.subheader("Profile")
    name = st.text_input("Full name", value=profile.name)
    email = st.text_input("Email", value=profile.email)
    phone = st.text_input("Phone", value=profile.phone)
    summary = st.text_area("Summary", value=profile.summary, height=100)

    st.markdown("**Work experience**")
    n_exp = st.number_input("Entries", min_value=0, max_value=10, value=len(profile.experience), key="n_exp")
    experience = []
    for i in range(int(n_exp)):
        prev = profile.experience[i] if i < len(profile.experience) else Experience()
        with st.expander(prev.position or f"Experience {i + 1}"):
            experience.append(Experience(
                company=st.text_input("Company", value=prev.company, key=f"exp_company_{i}"),
                position=st.text_input("Position", value=prev.position, key=f"exp_position_{i}"),
                start_date=st.text_input("Start", value=prev.start_date, key=f"exp_start_{i}"),
                end_date=st.text_input("End", value=prev.end_date, key=f"exp_end_{i}"),
                description=st.text_area("Description", value=prev.description, key=f"exp_desc_{i}"),
            ))

    st.markdown("**Education**")
    n_edu = st.number_input("Entries", min_value=0, max_value=10, value=len(profile.education), key="n_edu")
    education = []
    for i in range(int(n_edu)):
        prev = profile.education[i] if i < len(profile.education) else Education()
        with st.expander(prev.school or f"Education {i + 1}"):
            education.append(Education(
                school=st.text_input("School", value=prev.school, key=f"edu_school_{i}"),
                degree=st.text_input("Degree", value=prev.degree, key=f"edu_degree_{i}"),
                field=st.text_input("Field", value=prev.field, key=f"edu_field_{i}"),
                start_date=st.text_input("Start", value=prev.start_date, key=f"edu_start_{i}"),
                end_date=st.text_input("End", value=prev.end_date, key=f"edu_end_{i}"),
            ))

    skills = st.text_input("Skills (comma separated)", value=", ".join(profile.skills))

    edited = Profile(
        name=name,
        email=email,
        phone=phone,
        summary=summary,
        experience=experience,
        education=education,
        skills=skills,
    )
    if st.button("Save profile"):
        st.session_state.profile = edited
        _save_profile(edited)
        st.success("Profile saved")

# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

st.header("Search & Generate")

col1, col2, col3 = st.columns([3, 2, 1])
query = col1.text_input("Job title", placeholder="e.g. Backend Engineer")
location = col2.text_input("Location", placeholder="e.g. Warsaw")
tech = col3.selectbox("Technology", TECH_CHOICES)

# Plain widgets so toggling the template mode reruns immediately
use_template = st.checkbox("Use a custom CV template instead of my profile")
template_name = ""
custom_template = ""
if use_template:
    saved_templates = _load_templates()
    choice = st.selectbox("Saved templates", ["(new)"] + sorted(saved_templates))
    template_name = st.text_input(
        "Template name",
        value="" if choice == "(new)" else choice,
        key=f"template_name_{choice}",
        help="Saved locally and on the server under this name",
    )
    custom_template = st.text_area(
        "Template text",
        value=saved_templates.get(choice, ""),
        key=f"template_text_{choice}",
        height=250,
    )

submitted = st.button("Search & Generate", type="primary")

if submitted:
    body: dict = {"query": f"{query} {tech}".strip(), "location": location}
    if use_template and custom_template.strip():
        body["customTemplate"] = custom_template
        if template_name.strip():
            body["templateName"] = template_name.strip()
            _get_store().set(TEMPLATE_PREFIX + template_name.strip(), custom_template)
    else:
        body["profile"] = json.loads(edited.model_dump_json(by_alias=True))

    if not query.strip():
        st.error("Job title is required")
    else:
        with st.spinner("Searching offers and generating CVs... this can take several minutes"):
            try:
                # Generation is sequential and slow on local models
                resp = httpx.post(f"{API_URL}/search", json=body, timeout=None)
                data = resp.json()
                if resp.status_code != 200:
                    raise RuntimeError(data.get("error") or "Search failed")
                st.session_state.results = data.get("results", [])
            except (httpx.HTTPError, ValueError, RuntimeError) as e:
                logger.exception("Search request failed")
                st.error(str(e))

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

results = st.session_state.results
if results:
    st.subheader(f"{len(results)} CVs generated")
    for job in results:
        with st.container(border=True):
            st.markdown(f"**{job.get('title')}** @ {job.get('company')}")
            if job.get("location"):
                st.caption(job["location"])
            label = "Download PDF" if job.get("rendered", True) else "Download text"
            links = f"[{label}]({API_URL}/cvs/{job['cv_filename']})"
            if job.get("link"):
                links += f" · [Job offer]({job['link']})"
            st.markdown(links)
            with st.expander("Preview"):
                st.text(job.get("cv", ""))
elif submitted:
    st.info("No matching jobs found")
