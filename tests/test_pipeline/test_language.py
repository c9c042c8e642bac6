"""Tests for the posting language classifier."""

import pytest

from jobcv.models.cv import Language
from jobcv.pipeline.language import detect_language


class TestDetectLanguage:
    @pytest.mark.parametrize("text", [
        "Praca w Łodzi",
        "zespół",
        "ŻÓŁW",
    ])
    def test_diacritics_mean_polish(self, text):
        assert detect_language(text) is Language.POLISH

    @pytest.mark.parametrize("text", [
        "Szukamy programisty",
        "Dobre WYNAGRODZENIE oraz benefity",
        "firma IT",
        "Zatrudnimy developera",
    ])
    def test_function_words_mean_polish(self, text):
        assert detect_language(text) is Language.POLISH

    @pytest.mark.parametrize("text", [
        "We are hiring a backend engineer",
        "I will join a firmament startup",  # substring of a word is not a match
        "Python, Docker, AWS",
    ])
    def test_english_text(self, text):
        assert detect_language(text) is Language.ENGLISH

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_defaults_to_english(self, text):
        assert detect_language(text) is Language.ENGLISH

    @pytest.mark.parametrize("text", [
        "I have 5 years of Python experience",
        "Java i Python",
    ])
    def test_single_letter_i_is_not_a_polish_signal(self, text):
        # "i" (Polish "and") collides with the English pronoun
        assert detect_language(text) is Language.ENGLISH
