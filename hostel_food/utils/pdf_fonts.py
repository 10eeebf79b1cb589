"""Font selection for ReportLab report PDFs."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

UNICODE_FONT_NAME = "ReportUnicode"
FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    r"C:\\Windows\\Fonts\\arial.ttf",
)

_fallback_logged = False


def find_unicode_ttf() -> str | None:
    for candidate in FONT_CANDIDATES:
        if Path(candidate).exists():
            return candidate
    return None


def register_pdf_font() -> str:
    """Register a Unicode TTF if one is installed and return the font name to use."""
    global _fallback_logged

    font_path = find_unicode_ttf()
    if font_path:
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFont

        if UNICODE_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(UNICODE_FONT_NAME, font_path))
        return UNICODE_FONT_NAME

    if not _fallback_logged:
        logger.warning("[REPORTS] No Unicode TTF font found; student names may render incorrectly in PDFs.")
        _fallback_logged = True
    return "Helvetica"
