from pathlib import Path

from jobcv.models.cv import Language

BUILTIN_DIR = Path(__file__).parent / "builtin"

_FILES: dict[Language, str] = {
    Language.ENGLISH: "englishCV.txt",
    Language.POLISH: "polishCV.txt",
}


def load_template(language: Language) -> str:
    """Load the built-in template for a language."""
    path = BUILTIN_DIR / _FILES[language]
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path.name}")
    return path.read_text(encoding="utf-8")


def list_templates() -> dict[str, str]:
    """Map language name -> built-in template content."""
    return {language.value: load_template(language) for language in Language}
