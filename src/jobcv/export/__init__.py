"""Document export for generated CVs."""
from jobcv.export.pdf_renderer import render_pdf, render_pdf_file

__all__ = ["render_pdf", "render_pdf_file"]
