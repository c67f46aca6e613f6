import logging

import fitz  # pymupdf

from app.core.errors import ValidationError

logger = logging.getLogger(__name__)


def parse_resume(pdf_bytes: bytes) -> str:
    """Extract the text layer of an uploaded PDF resume."""
    if not pdf_bytes:
        raise ValidationError("Resume PDF is empty")

    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        logger.warning(f"Failed to open resume PDF: {e}")
        raise ValidationError("Failed to parse PDF") from e

    text = ""
    with doc:
        for page in doc:
            text += page.get_text()

    if not text.strip():
        raise ValidationError("No text could be extracted from the resume PDF")
    return text
