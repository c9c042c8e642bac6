"""Plain-text to PDF rendering using fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import logging
from pathlib import Path

from fpdf import FPDF

from jobcv.errors import RenderError

logger = logging.getLogger(__name__)

# Unicode TTF fonts with Polish glyphs (Linux, macOS, Windows)
_UNICODE_FONT_PATHS = [
    # Linux (apt install fonts-dejavu-core)
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    # Linux (apt install fonts-liberation)
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # macOS
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
]

MARGIN_MM = 14  # roughly the 40pt margin of a typical text document
LINE_HEIGHT_MM = 5.5
FONT_SIZE = 10


def _find_unicode_font() -> str | None:
    """Search for a Unicode-capable TTF font on the system."""
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists():
            return path
    return None


def _safe_text(text: str, pdf: FPDF) -> str:
    """Ensure text is encodable by the current font. Replace if needed."""
    if pdf.is_ttf_font:
        return text
    # Built-in core fonts (Helvetica etc.) only cover latin-1
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


def render_pdf(text: str, title: str = "CV") -> bytes:
    """Lay out text one line per paragraph on auto-breaking A4 pages."""
    pdf = FPDF(format="A4")
    pdf.set_title(title)
    pdf.set_margins(MARGIN_MM, MARGIN_MM, MARGIN_MM)
    pdf.set_auto_page_break(auto=True, margin=MARGIN_MM)
    pdf.add_page()

    font_name = "Helvetica"
    unicode_font = _find_unicode_font()
    if unicode_font:
        try:
            pdf.add_font("CVFont", "", unicode_font)
            font_name = "CVFont"
        except Exception:
            logger.debug("Failed to load font %s", unicode_font)
    pdf.set_font(font_name, size=FONT_SIZE)

    for line in text.splitlines():
        if not line.strip():
            pdf.ln(LINE_HEIGHT_MM)
            continue
        pdf.multi_cell(0, LINE_HEIGHT_MM, _safe_text(line.rstrip(), pdf))
        pdf.set_x(pdf.l_margin)

    return bytes(pdf.output())


def render_pdf_file(text: str, path: str | Path) -> Path:
    """Render text to a PDF at ``path``. Raises RenderError on any failure."""
    path = Path(path)
    try:
        data = render_pdf(text, title=path.stem)
        path.write_bytes(data)
    except Exception as e:
        raise RenderError(f"Failed to render {path.name}: {e}") from e
    return path
