"""
PDF stamping for ticket templates.

The ticket number is drawn on a one-page reportlab overlay sized to the
template's first page, which is then merged onto that page with pypdf.
"""

import logging
from io import BytesIO

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.pdfgen import canvas

from domain.errors import CorruptTemplateError

logger = logging.getLogger(__name__)

# Stamp position in PDF points, measured from the bottom-left corner
STAMP_X = 300
STAMP_Y = 150
STAMP_FONT = "Helvetica"
STAMP_FONT_SIZE = 18
STAMP_COLOR_RGB = (0, 0, 0)


def _load_reader(template_bytes: bytes) -> PdfReader:
    try:
        reader = PdfReader(BytesIO(template_bytes))
        if reader.is_encrypted:
            reader.decrypt("")
        page_count = len(reader.pages)
    except (PdfReadError, ValueError) as e:
        logger.error(f"Template is not a valid PDF ({len(template_bytes):,} bytes): {e}")
        raise CorruptTemplateError(f"Template is not a valid PDF: {e}")

    if page_count == 0:
        raise CorruptTemplateError("Template PDF has no pages")
    return reader


def _build_overlay(text: str, width: float, height: float) -> PdfReader:
    buffer = BytesIO()
    canv = canvas.Canvas(buffer, pagesize=(width, height))
    canv.setFillColorRGB(*STAMP_COLOR_RGB)
    canv.setFont(STAMP_FONT, STAMP_FONT_SIZE)
    canv.drawString(STAMP_X, STAMP_Y, text)
    canv.showPage()
    canv.save()
    buffer.seek(0)
    return PdfReader(buffer)


def stamp_text(template_bytes: bytes, text: str) -> bytes:
    """
    Draw text on the first page of a PDF.

    Args:
        template_bytes: Template PDF content
        text: Literal text to draw (the ticket number)

    Returns:
        bytes: The full stamped document

    Raises:
        CorruptTemplateError: If template_bytes is not a readable PDF
    """
    reader = _load_reader(template_bytes)

    try:
        writer = PdfWriter(clone_from=reader)
        first_page = writer.pages[0]
        width = float(first_page.mediabox.width)
        height = float(first_page.mediabox.height)
        overlay = _build_overlay(text, width, height)
        first_page.merge_page(overlay.pages[0])
    except (PdfReadError, ValueError, KeyError) as e:
        logger.error(f"Template first page cannot be stamped: {e}")
        raise CorruptTemplateError(f"Template is not a valid PDF: {e}")

    output = BytesIO()
    writer.write(output)
    stamped = output.getvalue()

    logger.info(
        f"Stamped '{text}' at ({STAMP_X}, {STAMP_Y}): "
        f"{len(reader.pages)} page(s), {len(stamped):,} bytes"
    )
    return stamped
