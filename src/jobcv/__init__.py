"""Search job boards and tailor a CV to every posting with a local LLM."""

__version__ = "0.1.0"
