"""Tests for base template resolution."""

import pytest

from jobcv.models.cv import Language, PromptStrategy, TemplateSource
from jobcv.pipeline.template_resolver import TemplateResolver
from jobcv.storage.kv_store import MemoryStore
from jobcv.templates.loader import load_template


class TestTemplateResolver:
    def test_custom_template_used_verbatim(self, resolver, english_job):
        request = resolver.resolve(english_job, custom_template="MY CV\n- item")

        assert request.base_text == "MY CV\n- item"
        assert request.strategy is PromptStrategy.CUSTOMIZE
        assert request.source is TemplateSource.CUSTOM

    def test_resolve_does_not_write_store(self, resolver, memory_store, english_job):
        resolver.resolve(english_job, custom_template="content", template_name="dev")
        assert memory_store.all() == {}

    def test_custom_template_wins_over_profile(self, resolver, english_job, sample_profile):
        request = resolver.resolve(english_job, custom_template="T", profile=sample_profile)
        assert request.source is TemplateSource.CUSTOM

    def test_stored_template_by_name(self, english_job):
        resolver = TemplateResolver(MemoryStore({"saved": "SAVED CV"}))
        request = resolver.resolve(english_job, template_name="saved")

        assert request.base_text == "SAVED CV"
        assert request.source is TemplateSource.STORED
        assert request.strategy is PromptStrategy.CUSTOMIZE

    def test_unknown_name_falls_back_to_profile(self, resolver, english_job, sample_profile):
        request = resolver.resolve(english_job, template_name="missing", profile=sample_profile)
        assert request.source is TemplateSource.PROFILE

    def test_profile_is_synthesized(self, resolver, english_job, sample_profile):
        request = resolver.resolve(english_job, profile=sample_profile)

        assert request.strategy is PromptStrategy.SYNTHESIZE
        assert request.base_text.startswith("Jane Doe")

    def test_builtin_english(self, resolver, english_job):
        request = resolver.resolve(english_job)

        assert request.language is Language.ENGLISH
        assert request.source is TemplateSource.BUILTIN
        assert request.base_text == load_template(Language.ENGLISH)

    def test_builtin_polish(self, resolver, polish_job):
        request = resolver.resolve(polish_job)

        assert request.language is Language.POLISH
        assert request.base_text == load_template(Language.POLISH)

    def test_language_detected_for_custom_templates_too(self, resolver, polish_job):
        request = resolver.resolve(polish_job, custom_template="CV")
        assert request.language is Language.POLISH

    def test_injected_builtin_loader(self, english_job):
        resolver = TemplateResolver(MemoryStore(), builtin_loader=lambda lang: f"<{lang.value}>")
        assert resolver.resolve(english_job).base_text == "<english>"


class TestSaveCustom:
    def test_overwrites_existing_name(self, resolver, memory_store):
        memory_store.set("dev", "old content")
        assert resolver.save_custom("new content", "dev") is True
        assert memory_store.get("dev") == "new content"

    @pytest.mark.parametrize("template, name", [("content", None), ("content", ""), (None, "dev"), ("", "dev")])
    def test_needs_both_template_and_name(self, resolver, memory_store, template, name):
        assert resolver.save_custom(template, name) is False
        assert memory_store.all() == {}

    def test_has_stored(self):
        resolver = TemplateResolver(MemoryStore({"saved": "SAVED CV"}))
        assert resolver.has_stored("saved") is True
        assert resolver.has_stored("missing") is False
