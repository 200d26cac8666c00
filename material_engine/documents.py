from __future__ import annotations

import base64
import io
from typing import List

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from .errors import InvalidDocument
from .logger import setup_logger
from .types import PatentDocument
from .utils import normalize_ws

logger = setup_logger(__name__)

# generateContent rejects inline payloads above roughly 20 MB
MAX_INLINE_BYTES = 20 * 1024 * 1024
PREVIEW_CHARS = 1200


def read_pdf_pages(pdf_bytes: bytes) -> List[str]:
    reader = PdfReader(io.BytesIO(pdf_bytes))
    pages = []
    for page in reader.pages:
        text = page.extract_text() or ""
        pages.append(text)
    return pages


def load_patent_document(pdf_bytes: bytes, name: str = "document.pdf") -> PatentDocument:
    """Validate an uploaded PDF and prepare it for inline submission."""
    if not pdf_bytes:
        raise InvalidDocument(f"{name} is empty")
    if len(pdf_bytes) > MAX_INLINE_BYTES:
        raise InvalidDocument(f"{name} is larger than {MAX_INLINE_BYTES // (1024 * 1024)} MB")
    try:
        pages = read_pdf_pages(pdf_bytes)
    except (PdfReadError, ValueError, OSError) as exc:
        raise InvalidDocument(f"{name} is not a readable PDF: {exc}") from exc
    if not pages:
        raise InvalidDocument(f"{name} has no pages")

    preview = normalize_ws(" ".join(pages))[:PREVIEW_CHARS]
    logger.info("Loaded %s: %d pages, %d bytes", name, len(pages), len(pdf_bytes))
    return PatentDocument(
        name=name,
        page_count=len(pages),
        preview_text=preview,
        base64_data=base64.b64encode(pdf_bytes).decode("ascii"),
    )
