"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
from io import BytesIO

import pytest
from pypdf import PdfReader
from reportlab.pdfgen import canvas

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('TEMPLATE_BUCKET', 'test-template-bucket')
os.environ.setdefault('TEMPLATE_KEY_PREFIX', 'ticketData/')
os.environ.setdefault('MAIL_QUEUE_URL', 'https://sqs.us-east-1.amazonaws.com/123456789012/ticket-mail')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')


def build_pdf(pages=1, label="ADMIT ONE"):
    """Build a small PDF with a label on every page."""
    buffer = BytesIO()
    canv = canvas.Canvas(buffer, pagesize=(595, 842))
    for page in range(pages):
        canv.setFont("Helvetica", 12)
        canv.drawString(50, 780, f"{label} - page {page + 1}")
        canv.showPage()
    canv.save()
    return buffer.getvalue()


def text_positions(pdf_bytes, page_index=0):
    """
    Read back text fragments from a page with their text matrix position.

    Returns:
        List of (text, x, y) tuples
    """
    fragments = []

    def visitor(text, cm, tm, font_dict, font_size):
        if text.strip():
            fragments.append((text.strip(), tm[4], tm[5]))

    page = PdfReader(BytesIO(pdf_bytes)).pages[page_index]
    page.extract_text(visitor_text=visitor)
    return fragments


@pytest.fixture
def template_pdf():
    """Single-page template PDF."""
    return build_pdf()


@pytest.fixture
def multipage_template_pdf():
    """Three-page template PDF."""
    return build_pdf(pages=3)
