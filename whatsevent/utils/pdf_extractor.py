"""PDF handling for event uploads.

Uploaded PDFs are checked, stored under the upload directory and their text
extracted with pypdf so it can be added to the event context.
"""

import io
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from pypdf import PdfReader

logger = logging.getLogger(__name__)

PDF_MAGIC = b'%PDF-'
PDF_CONTENT_TYPES = ('application/pdf', 'application/x-pdf')


class PDFExtractionError(Exception):
    """Raised when a PDF cannot be read."""
    pass


def is_pdf_upload(filename: Optional[str], content_type: Optional[str], data: bytes) -> bool:
    """
    Check whether an upload is a PDF.

    The file must start with the PDF signature and either carry a PDF
    content type or a `.pdf` file name.
    """
    if not data or not data.startswith(PDF_MAGIC):
        return False
    has_pdf_type = (content_type or '').split(';')[0].strip().lower() in PDF_CONTENT_TYPES
    has_pdf_name = (filename or '').lower().endswith('.pdf')
    return has_pdf_type or has_pdf_name


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text of every page.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts joined by blank lines. Pages without text are skipped, so
        a scanned PDF yields an empty string.

    Raises:
        PDFExtractionError: If the document cannot be parsed
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages: List[str] = []
        for page in reader.pages:
            text = page.extract_text() or ''
            if text.strip():
                pages.append(text.strip())
    except Exception as e:
        # pypdf reports some malformed files with errors other than PdfReadError
        raise PDFExtractionError(f"PDF extraction failed: {e}") from e

    logger.info(f"Extracted text from {len(pages)} of {len(reader.pages)} PDF pages")
    return '\n\n'.join(pages)


def store_pdf(data: bytes, upload_dir: Path, filename: Optional[str] = None) -> Path:
    """Write an uploaded PDF under a unique name and return its path."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(filename or 'event').stem or 'event'
    safe_stem = ''.join(c if c.isalnum() or c in '-_' else '_' for c in stem)[:50]
    path = upload_dir / f"{uuid.uuid4().hex[:8]}-{safe_stem}.pdf"
    path.write_bytes(data)
    logger.info(f"Stored uploaded PDF at {path}")
    return path
