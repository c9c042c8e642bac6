"""Choose the base CV text for a posting."""

from __future__ import annotations

import logging
from collections.abc import Callable

from jobcv.models.cv import GenerationRequest, Language, PromptStrategy, TemplateSource
from jobcv.models.job import JobPosting
from jobcv.models.profile import Profile
from jobcv.pipeline.language import detect_language
from jobcv.pipeline.profile_text import profile_to_text
from jobcv.storage.kv_store import KeyValueStore
from jobcv.templates.loader import load_template

logger = logging.getLogger(__name__)


class TemplateResolver:
    """Resolves the base text, language and prompting strategy for one job.

    Decision order:
      1. an inline custom template
      2. a previously saved custom template named ``template_name``
      3. text synthesized from the profile
      4. the built-in template for the posting's language
    """

    def __init__(
        self,
        store: KeyValueStore,
        builtin_loader: Callable[[Language], str] = load_template,
    ):
        self.store = store
        self.builtin_loader = builtin_loader

    def save_custom(self, custom_template: str | None, template_name: str | None) -> bool:
        """Store an inline template under its name. Overwrites; no-op without both."""
        if not custom_template or not template_name:
            return False
        self.store.set(template_name, custom_template)
        logger.info("Saved custom template %r", template_name)
        return True

    def has_stored(self, template_name: str) -> bool:
        return bool(self.store.get(template_name))

    def resolve(
        self,
        job: JobPosting,
        *,
        custom_template: str | None = None,
        template_name: str | None = None,
        profile: Profile | None = None,
    ) -> GenerationRequest:
        language = detect_language(job.snippet)

        if custom_template:
            return GenerationRequest(
                job=job,
                language=language,
                base_text=custom_template,
                strategy=PromptStrategy.CUSTOMIZE,
                source=TemplateSource.CUSTOM,
            )

        if template_name:
            stored = self.store.get(template_name)
            if stored:
                return GenerationRequest(
                    job=job,
                    language=language,
                    base_text=stored,
                    strategy=PromptStrategy.CUSTOMIZE,
                    source=TemplateSource.STORED,
                )
            logger.warning("Custom template %r not found, falling back", template_name)

        if profile is not None:
            return GenerationRequest(
                job=job,
                language=language,
                base_text=profile_to_text(profile),
                strategy=PromptStrategy.SYNTHESIZE,
                source=TemplateSource.PROFILE,
            )

        return GenerationRequest(
            job=job,
            language=language,
            base_text=self.builtin_loader(language),
            strategy=PromptStrategy.CUSTOMIZE,
            source=TemplateSource.BUILTIN,
        )
